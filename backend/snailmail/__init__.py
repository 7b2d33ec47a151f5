from .aggregator import (
    MODE_DETAILS,
    DistanceSummary,
    EstimateAggregator,
    TransportOption,
    build_options,
    distance_summary,
    toggle_selection,
)
from .contracts import DeliveryEstimate, LocationInput, TransportMode
from .errors import CalculationError, EstimateError, RequestError, UnknownTransportModeError
from .estimate_client import EstimateClient, close_estimate_client, get_estimate_client

__all__ = [
    "MODE_DETAILS",
    "CalculationError",
    "DeliveryEstimate",
    "DistanceSummary",
    "EstimateAggregator",
    "EstimateClient",
    "EstimateError",
    "LocationInput",
    "RequestError",
    "TransportMode",
    "TransportOption",
    "UnknownTransportModeError",
    "build_options",
    "close_estimate_client",
    "distance_summary",
    "get_estimate_client",
    "toggle_selection",
]
