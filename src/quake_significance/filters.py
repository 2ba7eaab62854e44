from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from .models import Event


@dataclass(frozen=True)
class EventFilter:
    """Date, magnitude and depth bounds for the event map.

    ``None`` leaves a bound open. Dates are whole UTC calendar days, so
    ``to_date`` includes every event on that day. An event whose depth could
    not be parsed fails any active depth bound.
    """

    from_date: date | None = None
    to_date: date | None = None
    min_magnitude: float | None = None
    max_magnitude: float | None = None
    min_depth: float | None = None
    max_depth: float | None = None

    def __post_init__(self) -> None:
        pairs = (
            ("date", self.from_date, self.to_date),
            ("magnitude", self.min_magnitude, self.max_magnitude),
            ("depth", self.min_depth, self.max_depth),
        )
        for name, low, high in pairs:
            if low is not None and high is not None and low > high:
                raise ValueError(f"Lower {name} bound {low} is above upper bound {high}")

    def _date_bounds(self) -> tuple[datetime | None, datetime | None]:
        start = (
            datetime(self.from_date.year, self.from_date.month, self.from_date.day, tzinfo=UTC)
            if self.from_date is not None
            else None
        )
        end = (
            datetime(self.to_date.year, self.to_date.month, self.to_date.day, tzinfo=UTC) + timedelta(days=1)
            if self.to_date is not None
            else None
        )
        return start, end

    def matches(self, event: Event) -> bool:
        start, end = self._date_bounds()
        if start is not None and event.timestamp < start:
            return False
        if end is not None and event.timestamp >= end:
            return False
        if not _within(event.magnitude, self.min_magnitude, self.max_magnitude):
            return False
        return _within(event.depth_km, self.min_depth, self.max_depth)


def _within(value: float, low: float | None, high: float | None) -> bool:
    if low is None and high is None:
        return True
    if not math.isfinite(value):
        return False
    if low is not None and value < low:
        return False
    return high is None or value <= high


def filter_events(events: Iterable[Event], event_filter: EventFilter) -> list[Event]:
    return [event for event in events if event_filter.matches(event)]


# Slider ranges for the event map, matching what normalize_record accepts
# without a range warning.
MAGNITUDE_LIMITS = (-3.0, 10.0)
DEPTH_LIMITS = (-20.0, 800.0)


def bounds_from_range(
    selected: tuple[float, float],
    limits: tuple[float, float],
) -> tuple[float | None, float | None]:
    """Slider selection to filter bounds; an end resting on its limit is open."""
    low, high = selected
    return (
        None if low <= limits[0] else low,
        None if high >= limits[1] else high,
    )
