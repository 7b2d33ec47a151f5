"""Async client for the SnailMail distance service."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from .contracts import (
    CalculateRequest,
    DeliveryEstimate,
    LocationInput,
    LocationLike,
    TransportMode,
    check_estimate_mode,
    parse_estimate_set,
)
from .errors import CalculationError, EstimateError, RequestError
from .logging_config import get_logger
from .metrics import record_request
from .settings import settings

logger = get_logger(__name__)

T = TypeVar("T")

CALCULATE_PATH = "/api/distance/calculate"
CALCULATE_ALL_PATH = "/api/distance/calculate-all"
HEALTH_PATH = "/api/distance/health"


def _error_message(body: Any) -> str | None:
    """The service's ``error`` field when it holds a usable string."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str) and error.strip():
            return error
    return None


def _error_from_body(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return _error_message(body)


def _contract_violation(exc: ValueError) -> CalculationError:
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"]) or "data"
        detail = f"{where}: {first['msg']}"
    else:
        detail = str(exc)
    return CalculationError(f"Invalid response from distance service ({detail})")


class EstimateClient:
    """
    Fetch delivery estimates from the distance service.

    Both calculate operations raise ``RequestError`` for transport or HTTP
    status failures and ``CalculationError`` when the service answers with
    ``success: false``. Nothing is retried here; retry policy belongs to the
    caller.

    Pass either ``client`` (an already configured ``httpx.AsyncClient``, left
    open on close) or ``timeout``/``transport`` for a client built here.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: httpx.Timeout | float | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        if client is not None:
            if timeout is not None or transport is not None:
                raise ValueError("timeout and transport cannot be combined with an injected client")
            self._client = client
            self._owns_client = False
        else:
            self._client = httpx.AsyncClient(
                timeout=timeout if timeout is not None else settings.http_timeout,
                transport=transport,
                headers={"Content-Type": "application/json"},
            )
            self._owns_client = True

    async def __aenter__(self) -> EstimateClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def calculate_single(
        self,
        origin: LocationLike,
        destination: LocationLike,
        mode: TransportMode | str,
    ) -> DeliveryEstimate:
        """Estimate delivery for one transport mode."""
        mode = TransportMode(mode)
        request = CalculateRequest(
            origin=LocationInput.parse(origin),
            destination=LocationInput.parse(destination),
            mode=mode,
        )

        def parse(data: Any) -> DeliveryEstimate:
            return check_estimate_mode(DeliveryEstimate.model_validate(data), mode)

        return await self._calculate(CALCULATE_PATH, request.to_payload(), parse)

    async def calculate_all(
        self,
        origin: LocationLike,
        destination: LocationLike,
    ) -> dict[TransportMode, DeliveryEstimate]:
        """Estimate delivery for every mode in a single round trip."""
        request = CalculateRequest(
            origin=LocationInput.parse(origin),
            destination=LocationInput.parse(destination),
        )
        return await self._calculate(CALCULATE_ALL_PATH, request.to_payload(), parse_estimate_set)

    async def health_check(self) -> bool:
        """Liveness probe. Never raises; any failure reads as unhealthy."""
        started = time.perf_counter()
        try:
            response = await self._client.get(self._url(HEALTH_PATH))
            body = response.json()
        except Exception as exc:
            record_request(HEALTH_PATH, "request_error", time.perf_counter() - started)
            logger.warning("health_check_failed", endpoint=HEALTH_PATH, error=str(exc))
            return False
        healthy = isinstance(body, dict) and body.get("success") is True
        record_request(HEALTH_PATH, "ok" if healthy else "unhealthy", time.perf_counter() - started)
        if not healthy:
            logger.warning("health_check_unhealthy", endpoint=HEALTH_PATH, status=response.status_code)
        return healthy

    async def _calculate(
        self,
        path: str,
        payload: dict[str, Any],
        parse: Callable[[Any], T],
    ) -> T:
        started = time.perf_counter()
        outcome = "ok"
        try:
            response = await self._send(path, payload)
            data = self._unwrap(response)
            try:
                return parse(data)
            except ValueError as exc:
                raise _contract_violation(exc) from exc
        except EstimateError as exc:
            outcome = f"{exc.kind}_error"
            logger.warning(
                "estimate_request_failed",
                endpoint=path,
                kind=exc.kind,
                status=getattr(exc, "status_code", None),
                error=exc.message,
            )
            raise
        finally:
            elapsed = time.perf_counter() - started
            record_request(path, outcome, elapsed)
            logger.info(
                "estimate_request",
                endpoint=path,
                outcome=outcome,
                latency_ms=round(elapsed * 1000, 1),
            )

    async def _send(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            return await self._client.post(self._url(path), json=payload)
        except httpx.TimeoutException as exc:
            raise RequestError(f"Request to {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise RequestError(f"Request to {path} failed: {exc}") from exc

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        if not response.is_success:
            message = _error_from_body(response) or f"HTTP error! status: {response.status_code}"
            raise RequestError(message, status_code=response.status_code)
        try:
            body = response.json()
        except ValueError as exc:
            raise RequestError(
                "Invalid response from estimate service", status_code=response.status_code
            ) from exc
        success = body.get("success") if isinstance(body, dict) else None
        if success is False:
            raise CalculationError(_error_message(body))
        if success is not True:
            raise RequestError(
                "Invalid response from estimate service", status_code=response.status_code
            )
        return body.get("data")


_client: EstimateClient | None = None


def get_estimate_client() -> EstimateClient:
    """Shared client bound to the configured base URL."""
    global _client
    if _client is None:
        _client = EstimateClient()
    return _client


async def close_estimate_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


__all__ = [
    "CALCULATE_ALL_PATH",
    "CALCULATE_PATH",
    "HEALTH_PATH",
    "EstimateClient",
    "close_estimate_client",
    "get_estimate_client",
]
