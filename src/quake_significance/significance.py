"""Weekly significance view: window, clusters and their visual encoding.

Every call recomputes from the event list it is given; nothing is cached
between week selections.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .clustering import cluster_events_with_stats
from .color import RGB, color_for, to_css_rgb, visual_radius
from .config import DEFAULT_CLUSTER_RADIUS_KM, DEFAULT_EPOCH_START
from .models import Cluster, Event, TimeWindow
from .windows import compute_window, select_events, validate_week_index


@dataclass(frozen=True)
class ClusterMarker:
    cluster: Cluster
    color: RGB
    css_color: str
    visual_radius: float

    def as_dict(self) -> dict[str, Any]:
        return {
            **self.cluster.as_dict(),
            "color": list(self.color),
            "css_color": self.css_color,
            "visual_radius": self.visual_radius,
        }


@dataclass(frozen=True)
class SignificanceMap:
    window: TimeWindow
    radius_km: float
    markers: list[ClusterMarker]
    stats: dict[str, Any] = field(default_factory=dict)

    @property
    def clusters(self) -> list[Cluster]:
        return [marker.cluster for marker in self.markers]


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(tz=UTC)


def get_window(
    week_index: int,
    *,
    epoch_start: Any = DEFAULT_EPOCH_START,
    now: datetime | None = None,
) -> TimeWindow:
    validate_week_index(week_index, epoch_start, _now(now))
    return compute_window(epoch_start, week_index)


def marker_for(cluster: Cluster) -> ClusterMarker:
    rgb = color_for(cluster.mean_magnitude)
    return ClusterMarker(
        cluster=cluster,
        color=rgb,
        css_color=to_css_rgb(rgb),
        visual_radius=visual_radius(cluster.mean_magnitude),
    )


def build_significance_map(
    events: Sequence[Event],
    week_index: int,
    *,
    epoch_start: Any = DEFAULT_EPOCH_START,
    radius_km: float = DEFAULT_CLUSTER_RADIUS_KM,
    now: datetime | None = None,
) -> SignificanceMap:
    window = get_window(week_index, epoch_start=epoch_start, now=now)
    selected = select_events(events, window)
    clusters, stats = cluster_events_with_stats(selected, radius_km)
    stats = {"window_event_count": len(selected), **stats}
    return SignificanceMap(
        window=window,
        radius_km=float(radius_km),
        markers=[marker_for(cluster) for cluster in clusters],
        stats=stats,
    )


def get_clusters(
    events: Sequence[Event],
    week_index: int,
    *,
    epoch_start: Any = DEFAULT_EPOCH_START,
    radius_km: float = DEFAULT_CLUSTER_RADIUS_KM,
    now: datetime | None = None,
) -> list[Cluster]:
    return build_significance_map(
        events,
        week_index,
        epoch_start=epoch_start,
        radius_km=radius_km,
        now=now,
    ).clusters
