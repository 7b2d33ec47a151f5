"""Rank delivery estimates and track which option is expanded."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .contracts import DeliveryEstimate, TransportMode
from .errors import UnknownTransportModeError
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ModeDetails:
    emoji: str
    description: str


MODE_DETAILS: dict[TransportMode, ModeDetails] = {
    TransportMode.PIGEON: ModeDetails(
        emoji="🕊️",
        description="Air mail at its finest! A trusty pigeon carries your message through the skies.",
    ),
    TransportMode.WALKING: ModeDetails(
        emoji="🚶",
        description="The classic approach. Your message walks to its destination, one step at a time.",
    ),
    TransportMode.SWIMMING: ModeDetails(
        emoji="🏊",
        description="For water-based delivery. Your message swims across rivers, lakes, and oceans.",
    ),
    TransportMode.ROCK_CLIMBING: ModeDetails(
        emoji="🧗",
        description="The most adventurous route. Your message climbs mountains to reach its destination.",
    ),
}

_missing_details = set(TransportMode) - set(MODE_DETAILS)
if _missing_details:  # pragma: no cover - guards edits to TransportMode
    raise RuntimeError(f"MODE_DETAILS has no entry for: {sorted(m.value for m in _missing_details)}")


def resolve_mode(mode: TransportMode | str) -> TransportMode:
    """Map a raw mode identifier onto the closed enum, failing fast on strangers."""
    try:
        return TransportMode(mode)
    except ValueError:
        raise UnknownTransportModeError(mode) from None


def mode_details(mode: TransportMode | str) -> ModeDetails:
    return MODE_DETAILS[resolve_mode(mode)]


@dataclass(frozen=True, slots=True)
class TransportOption:
    mode: TransportMode
    emoji: str
    description: str
    estimate: DeliveryEstimate

    @property
    def title(self) -> str:
        return " ".join(word.capitalize() for word in self.mode.value.split("-"))

    @property
    def speed_display(self) -> str:
        return f"{self.estimate.speed_kmh:g} km/h"


@dataclass(frozen=True, slots=True)
class DistanceSummary:
    text: str
    is_ai_estimate: bool


def build_options(
    results: Mapping[TransportMode | str, DeliveryEstimate],
) -> list[TransportOption]:
    """
    Attach display metadata to every estimate and rank fastest first.

    One option per entry; nothing is dropped. The sort is stable, so options
    with equal delivery times keep the mapping's iteration order.
    """
    options = []
    for key, estimate in results.items():
        mode = resolve_mode(key)
        details = MODE_DETAILS[mode]
        options.append(
            TransportOption(
                mode=mode,
                emoji=details.emoji,
                description=details.description,
                estimate=estimate,
            )
        )
    options.sort(key=lambda option: option.estimate.delivery_time_seconds)
    return options


def distance_summary(options: Sequence[TransportOption]) -> DistanceSummary | None:
    """
    Total distance for the route, read from the fastest option.

    Every mode travels the same physical route, so the distance is reported
    once rather than per mode.
    """
    if not options:
        return None
    fastest = options[0].estimate
    return DistanceSummary(text=fastest.distance_text, is_ai_estimate=fastest.is_ai_estimate)


Selection = TransportMode | None


def toggle_selection(current: Selection, mode: TransportMode | str) -> Selection:
    """Next selection after a click: the same mode collapses, any other replaces."""
    target = resolve_mode(mode)
    if current == target:
        return None
    return target


class EstimateAggregator:
    """View model over one result set: ranked options plus the expanded option."""

    def __init__(
        self, results: Mapping[TransportMode | str, DeliveryEstimate] | None = None
    ) -> None:
        self._options: list[TransportOption] = []
        self._selected: Selection = None
        if results is not None:
            self.load(results)

    @property
    def options(self) -> tuple[TransportOption, ...]:
        return tuple(self._options)

    @property
    def selected(self) -> Selection:
        return self._selected

    @property
    def selected_option(self) -> TransportOption | None:
        if self._selected is None:
            return None
        return next(option for option in self._options if option.mode == self._selected)

    @property
    def summary(self) -> DistanceSummary | None:
        return distance_summary(self._options)

    def load(self, results: Mapping[TransportMode | str, DeliveryEstimate]) -> None:
        """Replace the result set; selection always starts empty."""
        self._options = build_options(results)
        self._selected = None
        logger.debug(
            "estimate_options_loaded",
            count=len(self._options),
            fastest=self._options[0].mode.value if self._options else None,
        )

    def reset(self) -> None:
        self._options = []
        self._selected = None

    def toggle(self, mode: TransportMode | str) -> Selection:
        target = resolve_mode(mode)
        if all(option.mode != target for option in self._options):
            raise UnknownTransportModeError(mode)
        self._selected = toggle_selection(self._selected, target)
        return self._selected


__all__ = [
    "MODE_DETAILS",
    "DistanceSummary",
    "EstimateAggregator",
    "ModeDetails",
    "Selection",
    "TransportOption",
    "build_options",
    "distance_summary",
    "mode_details",
    "resolve_mode",
    "toggle_selection",
]
