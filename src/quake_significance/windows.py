"""Week-long windows counted from a fixed epoch start."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import Any

from .models import WEEK, Event, TimeWindow
from .utils import to_utc


def _as_instant(value: Any, name: str) -> datetime:
    instant = to_utc(value)
    if instant is None:
        raise ValueError(f"{name} is not a valid date/time: {value!r}")
    return instant


def compute_window(epoch_start: Any, week_index: int) -> TimeWindow:
    if isinstance(week_index, bool) or not isinstance(week_index, int):
        raise ValueError(f"week_index must be an integer, got {week_index!r}")
    if week_index < 0:
        raise ValueError(f"week_index must be >= 0, got {week_index}")
    start = _as_instant(epoch_start, "epoch_start") + week_index * WEEK
    return TimeWindow(index=week_index, start=start, end=start + WEEK)


def total_windows(epoch_start: Any, now: Any) -> int:
    """Number of started weeks between ``epoch_start`` and ``now``."""
    elapsed = _as_instant(now, "now") - _as_instant(epoch_start, "epoch_start")
    return max(0, math.ceil(elapsed / WEEK))


def validate_week_index(week_index: Any, epoch_start: Any, now: Any) -> int:
    """Return ``week_index`` if it addresses an existing window.

    Out-of-range indices are rejected rather than clamped so that a stale
    slider position surfaces as an error instead of silently showing a
    different week.
    """
    if isinstance(week_index, bool) or not isinstance(week_index, int):
        raise ValueError(f"week_index must be an integer, got {week_index!r}")
    count = total_windows(epoch_start, now)
    if count == 0:
        raise ValueError("No windows available: now is not after epoch_start")
    if not 0 <= week_index <= count - 1:
        raise ValueError(f"week_index {week_index} out of range [0, {count - 1}]")
    return week_index


def iter_windows(epoch_start: Any, now: Any) -> Iterator[TimeWindow]:
    for index in range(total_windows(epoch_start, now)):
        yield compute_window(epoch_start, index)


def latest_week_index(epoch_start: Any, now: Any) -> int:
    count = total_windows(epoch_start, now)
    if count == 0:
        raise ValueError("No windows available: now is not after epoch_start")
    return count - 1


def select_events(events: Iterable[Event], window: TimeWindow) -> list[Event]:
    return [event for event in events if window.contains(event.timestamp)]
