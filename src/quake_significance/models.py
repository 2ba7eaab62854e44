from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

WEEK = timedelta(days=7)


@dataclass(frozen=True)
class Event:
    event_id: str
    latitude_raw: str
    longitude_raw: str
    magnitude: float
    depth_km: float
    region: str
    timestamp: datetime


@dataclass(frozen=True)
class ParsedCoordinate:
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )


@dataclass(frozen=True)
class TimeWindow:
    index: int
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        # Both ends inclusive: an event exactly on a shared boundary belongs
        # to the two adjacent windows.
        return self.start <= instant <= self.end

    def as_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "start_utc": self.start.isoformat(),
            "end_utc": self.end.isoformat(),
        }


@dataclass
class Cluster:
    """Running aggregate of nearby events.

    Build through ``seed``; a cluster with no members reports NaN
    magnitudes. The centroid is the arithmetic mean of every member position added so
    far. Members are never removed and earlier assignments are never
    revisited.
    """

    centroid_latitude: float
    centroid_longitude: float
    member_magnitudes: list[float] = field(default_factory=list)
    total_magnitude: float = 0.0
    member_ids: list[str] = field(default_factory=list)
    member_regions: list[str] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None

    @classmethod
    def seed(cls, event: Event, latitude: float, longitude: float) -> "Cluster":
        cluster = cls(centroid_latitude=latitude, centroid_longitude=longitude)
        cluster._record(event)
        return cluster

    def add(self, event: Event, latitude: float, longitude: float) -> None:
        count_before = self.member_count
        self.centroid_latitude = (self.centroid_latitude * count_before + latitude) / (count_before + 1)
        self.centroid_longitude = (self.centroid_longitude * count_before + longitude) / (count_before + 1)
        self._record(event)

    def _record(self, event: Event) -> None:
        self.member_magnitudes.append(event.magnitude)
        self.total_magnitude += event.magnitude
        self.member_ids.append(event.event_id)
        self.member_regions.append(event.region)
        if self.start_time is None or event.timestamp < self.start_time:
            self.start_time = event.timestamp
        if self.end_time is None or event.timestamp > self.end_time:
            self.end_time = event.timestamp

    @property
    def member_count(self) -> int:
        return len(self.member_magnitudes)

    @property
    def mean_magnitude(self) -> float:
        if not self.member_magnitudes:
            return math.nan
        return self.total_magnitude / self.member_count

    @property
    def max_magnitude(self) -> float:
        return max(self.member_magnitudes, default=math.nan)

    @property
    def region_hint(self) -> str:
        regions = [region for region in self.member_regions if region]
        if not regions:
            return "unknown"
        # most_common keeps first-seen order for equal counts.
        return Counter(regions).most_common(1)[0][0]

    def as_dict(self) -> dict[str, Any]:
        return {
            "centroid_lat": self.centroid_latitude,
            "centroid_lon": self.centroid_longitude,
            "event_count": self.member_count,
            "total_magnitude": self.total_magnitude,
            "mean_magnitude": self.mean_magnitude,
            "max_magnitude": self.max_magnitude,
            "member_magnitudes": list(self.member_magnitudes),
            "member_ids": list(self.member_ids),
            "region_hint": self.region_hint,
            "start_time_utc": self.start_time.isoformat() if self.start_time else None,
            "end_time_utc": self.end_time.isoformat() if self.end_time else None,
        }
