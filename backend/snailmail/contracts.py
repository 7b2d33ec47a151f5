from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

COORDINATE_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


class TransportMode(str, Enum):
    """The fixed set of delivery methods offered by the service."""

    WALKING = "walking"
    SWIMMING = "swimming"
    PIGEON = "pigeon"
    ROCK_CLIMBING = "rock-climbing"

    def __str__(self) -> str:
        return self.value


EstimateMethod = Literal["google-maps", "claude-estimate"]
AI_ESTIMATE_METHOD: EstimateMethod = "claude-estimate"


# --- Route endpoints ---
class LocationInput(BaseModel):
    """A free-text address or an explicit lat/lng pair, never both."""

    model_config = ConfigDict(frozen=True)

    address: str | None = None
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)

    @field_validator("address")
    @classmethod
    def _address(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = " ".join(value.split())
        return cleaned or None

    @model_validator(mode="after")
    def _exactly_one(self) -> LocationInput:
        has_coords = self.lat is not None or self.lng is not None
        if has_coords and (self.lat is None or self.lng is None):
            raise ValueError("lat and lng must be provided together")
        if has_coords and self.address is not None:
            raise ValueError("provide either an address or a lat/lng pair, not both")
        if not has_coords and self.address is None:
            raise ValueError("an address or a lat/lng pair is required")
        return self

    @classmethod
    def parse(cls, value: LocationLike) -> LocationInput:
        """Coerce user input into a location.

        Strings shaped like ``"40.4093,49.8671"`` become coordinates; any other
        string is treated as an address.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        if isinstance(value, str):
            match = COORDINATE_PATTERN.match(value)
            if match:
                return cls(lat=float(match.group(1)), lng=float(match.group(2)))
            return cls(address=value)
        if isinstance(value, (tuple, list)) and len(value) == 2:
            lat, lng = value
            return cls(lat=lat, lng=lng)
        raise TypeError(f"Cannot interpret {value!r} as a location")

    @property
    def label(self) -> str:
        if self.address is not None:
            return self.address
        return f"{self.lat:.4f},{self.lng:.4f}"


LocationLike = Union[LocationInput, Mapping[str, Any], tuple[float, float], list[float], str]


class DeliveryEstimate(BaseModel):
    """One mode's estimate as returned by the distance service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    distance_meters: float = Field(alias="distanceMeters", ge=0)
    distance_text: str = Field(alias="distanceText")
    duration_seconds: float = Field(alias="durationSeconds", ge=0)
    delivery_time_seconds: float = Field(alias="deliveryTimeSeconds", ge=0)
    delivery_time_text: str = Field(alias="deliveryTimeText")
    origin: str
    destination: str
    transport_mode: TransportMode = Field(alias="transportMode")
    speed_kmh: float = Field(alias="speedKmH", gt=0)
    is_estimate: bool = Field(alias="isEstimate")
    method: EstimateMethod

    @property
    def is_ai_estimate(self) -> bool:
        return self.method == AI_ESTIMATE_METHOD


class CalculateRequest(BaseModel):
    origin: LocationInput
    destination: LocationInput
    mode: TransportMode | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def parse_estimate_set(data: Any) -> dict[TransportMode, DeliveryEstimate]:
    """Validate a calculate-all payload.

    The service must return exactly one estimate per known mode, each filed
    under its own mode; a missing, unexpected or mislabelled entry raises
    ``ValueError``. Server ordering is preserved.
    """
    if not isinstance(data, Mapping):
        raise ValueError("estimate set must be an object keyed by transport mode")
    known = {mode.value for mode in TransportMode}
    unexpected = sorted(str(key) for key in data if key not in known)
    if unexpected:
        raise ValueError(f"unexpected transport modes: {', '.join(unexpected)}")
    missing = [mode.value for mode in TransportMode if mode.value not in data]
    if missing:
        raise ValueError(f"missing transport modes: {', '.join(missing)}")
    estimates = {}
    for key, value in data.items():
        mode = TransportMode(key)
        estimate = DeliveryEstimate.model_validate(value)
        check_estimate_mode(estimate, mode)
        estimates[mode] = estimate
    return estimates


def check_estimate_mode(estimate: DeliveryEstimate, mode: TransportMode) -> DeliveryEstimate:
    """Reject an estimate computed for a different mode than the one it answers."""
    if estimate.transport_mode is not mode:
        raise ValueError(
            f"estimate for {mode.value} reports transport mode {estimate.transport_mode.value}"
        )
    return estimate


__all__ = [
    "AI_ESTIMATE_METHOD",
    "COORDINATE_PATTERN",
    "CalculateRequest",
    "DeliveryEstimate",
    "EstimateMethod",
    "LocationInput",
    "LocationLike",
    "TransportMode",
    "check_estimate_mode",
    "parse_estimate_set",
]
