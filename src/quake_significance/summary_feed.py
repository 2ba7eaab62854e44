from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from .coordinates import parse_coordinates
from .models import Event
from .significance import SignificanceMap
from .windows import iter_windows, select_events

EVENT_COLUMNS = ["event_id", "latitude_raw", "longitude_raw", "magnitude", "depth_km", "region", "timestamp"]
CLUSTER_COLUMNS = [
    "centroid_lat",
    "centroid_lon",
    "event_count",
    "mean_magnitude",
    "max_magnitude",
    "region_hint",
    "css_color",
    "visual_radius",
    "start_time_utc",
    "end_time_utc",
]


def events_frame(events: Sequence[Event]) -> pd.DataFrame:
    if not events:
        return pd.DataFrame(columns=EVENT_COLUMNS)
    frame = pd.DataFrame([asdict(event) for event in events], columns=EVENT_COLUMNS)
    frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True)
    return frame


def event_positions_frame(events: Sequence[Event]) -> pd.DataFrame:
    """Events with valid coordinates, plus parsed ``latitude``/``longitude``."""
    frame = events_frame(events)
    positions = [parse_coordinates(lat, lon) for lat, lon in zip(frame["latitude_raw"], frame["longitude_raw"])]
    frame["latitude"] = pd.Series([p.latitude for p in positions], index=frame.index, dtype=float)
    frame["longitude"] = pd.Series([p.longitude for p in positions], index=frame.index, dtype=float)
    valid = pd.Series([p.is_valid for p in positions], index=frame.index, dtype=bool)
    return frame[valid].reset_index(drop=True)


def clusters_frame(significance: SignificanceMap) -> pd.DataFrame:
    rows = [marker.as_dict() for marker in significance.markers]
    if not rows:
        return pd.DataFrame(columns=CLUSTER_COLUMNS)
    frame = pd.DataFrame(rows)[CLUSTER_COLUMNS]
    return frame.sort_values("event_count", ascending=False, kind="stable").reset_index(drop=True)


def weekly_counts(events: Sequence[Event], *, epoch_start: Any, now: datetime) -> list[dict[str, Any]]:
    return [
        {**window.as_dict(), "event_count": len(select_events(events, window))}
        for window in iter_windows(epoch_start, now)
    ]


def build_summary_feed(
    *,
    now_utc: datetime,
    source: str,
    significance: SignificanceMap,
    events: Sequence[Event],
    epoch_start: Any,
    rejected_count: int,
    warning_count: int,
) -> dict[str, Any]:
    frame = clusters_frame(significance)
    return {
        "generated_at_utc": now_utc.isoformat(),
        "source": source,
        "window": significance.window.as_dict(),
        "radius_km": significance.radius_km,
        "quality": {
            "accepted_count": len(events),
            "rejected_count": rejected_count,
            "warning_count": warning_count,
        },
        "cluster_stats": significance.stats,
        "kpis": {
            "max_mean_magnitude": float(frame["mean_magnitude"].max()) if not frame.empty else None,
            "largest_cluster_size": int(frame["event_count"].max()) if not frame.empty else 0,
        },
        "clusters": [marker.as_dict() for marker in significance.markers],
        "weekly_counts": weekly_counts(events, epoch_start=epoch_start, now=now_utc),
    }


def build_clusters_geojson(significance: SignificanceMap) -> dict[str, Any]:
    features = []
    for index, marker in enumerate(significance.markers):
        cluster = marker.cluster
        features.append(
            {
                "type": "Feature",
                "id": index,
                "geometry": {
                    "type": "Point",
                    "coordinates": [cluster.centroid_longitude, cluster.centroid_latitude],
                },
                "properties": {
                    "event_count": cluster.member_count,
                    "mean_magnitude": cluster.mean_magnitude,
                    "max_magnitude": cluster.max_magnitude,
                    "region_hint": cluster.region_hint,
                    "color": marker.css_color,
                    "visual_radius": marker.visual_radius,
                },
            }
        )
    return {
        "type": "FeatureCollection",
        "window": significance.window.as_dict(),
        "features": features,
    }


def write_json(data: dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as file:
        json.dump(data, file, indent=2, default=str)
