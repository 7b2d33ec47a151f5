import os
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Never let a developer .env point the suite at a live service
os.environ["SNAILMAIL_API_URL"] = "http://snailmail.test"

from backend.snailmail.contracts import DeliveryEstimate  # noqa: E402
from backend.snailmail.estimate_client import EstimateClient  # noqa: E402
from backend.snailmail.logging_config import configure_structlog  # noqa: E402
from backend.snailmail.settings import settings  # noqa: E402

configure_structlog(json_logs=True)

BASE_URL = "http://snailmail.test"

SPEEDS = {"walking": 5, "swimming": 3, "pigeon": 80, "rock-climbing": 1}


def estimate_payload(mode: str = "pigeon", **overrides):
    """Wire-shaped (camelCase) estimate as the service sends it."""
    distance = overrides.pop("distanceMeters", 120_000)
    speed = overrides.pop("speedKmH", SPEEDS.get(mode, 5))
    delivery = distance / (speed / 3.6)
    base = {
        "distanceMeters": distance,
        "distanceText": f"{distance / 1000:g} km",
        "durationSeconds": distance / (50 / 3.6),
        "deliveryTimeSeconds": delivery,
        "deliveryTimeText": f"{round(delivery / 60)} min",
        "origin": "Baku, Azerbaijan",
        "destination": "Sumqayit, Azerbaijan",
        "transportMode": mode,
        "speedKmH": speed,
        "isEstimate": False,
        "method": "google-maps",
    }
    base.update(overrides)
    return base


def build_estimate(mode: str = "pigeon", **overrides) -> DeliveryEstimate:
    return DeliveryEstimate.model_validate(estimate_payload(mode, **overrides))


@pytest.fixture
def make_estimate():
    return build_estimate


@pytest.fixture
def make_payload():
    return estimate_payload


@pytest.fixture
def mock_client():
    """Build an EstimateClient whose requests are answered by ``handler``."""

    def _factory(handler) -> EstimateClient:
        return EstimateClient(BASE_URL, transport=httpx.MockTransport(handler))

    return _factory


@pytest.fixture(autouse=True)
def default_settings():
    original = settings.SNAILMAIL_API_URL
    settings.SNAILMAIL_API_URL = BASE_URL
    yield
    settings.SNAILMAIL_API_URL = original
