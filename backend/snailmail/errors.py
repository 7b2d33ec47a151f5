"""Errors raised by the estimate client and the option aggregator."""

from __future__ import annotations

from typing import Literal

ErrorKind = Literal["request", "calculation"]


class EstimateError(RuntimeError):
    """Base class for failures talking to the distance service."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RequestError(EstimateError):
    """Transport or HTTP status level failure."""

    kind: ErrorKind = "request"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class CalculationError(EstimateError):
    """The service was reached but reported the calculation did not succeed."""

    kind: ErrorKind = "calculation"

    DEFAULT_MESSAGE = "Calculation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.DEFAULT_MESSAGE)


class UnknownTransportModeError(KeyError):
    """A mode outside the fixed set reached code that needs its metadata."""

    def __init__(self, mode: object) -> None:
        self.mode = mode
        super().__init__(f"Unknown transport mode: {mode!r}")

    def __str__(self) -> str:
        return str(self.args[0])


__all__ = [
    "CalculationError",
    "ErrorKind",
    "EstimateError",
    "RequestError",
    "UnknownTransportModeError",
]
