"""Greedy radius clustering of earthquake events.

Each event is compared, in input order, with the current centroid of every
cluster formed so far. It joins the first cluster (in creation order) whose
centroid lies within ``radius_km``, even if a later cluster is nearer;
otherwise it seeds a new cluster. Centroids move as members join, so the
result depends on input order. There is no spatial index: the scan is
O(n * k) for n events and k clusters, which suits a map's worth of events
per week and nothing larger.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

import numpy as np

from .coordinates import parse_coordinates
from .logging_utils import get_logger
from .models import Cluster, Event
from .utils import haversine_km_to_many

logger = get_logger("quake_significance.clustering")


def _check_radius(radius_km: float) -> float:
    try:
        radius = float(radius_km)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"radius_km must be a number, got {radius_km!r}") from exc
    if not math.isfinite(radius) or radius < 0:
        raise ValueError(f"radius_km must be a finite number >= 0, got {radius_km!r}")
    return radius


def cluster_events_with_stats(
    events: Iterable[Event],
    radius_km: float,
) -> tuple[list[Cluster], dict[str, Any]]:
    radius = _check_radius(radius_km)
    clusters: list[Cluster] = []
    input_count = 0
    skipped = 0

    for event in events:
        input_count += 1
        position = parse_coordinates(event.latitude_raw, event.longitude_raw)
        if not position.is_valid:
            skipped += 1
            logger.warning(
                "Invalid earthquake coordinates for event %s: %r %r",
                event.event_id,
                event.latitude_raw,
                event.longitude_raw,
            )
            continue

        target: Cluster | None = None
        if clusters:
            distances = haversine_km_to_many(
                position.latitude,
                position.longitude,
                np.fromiter((c.centroid_latitude for c in clusters), dtype=float, count=len(clusters)),
                np.fromiter((c.centroid_longitude for c in clusters), dtype=float, count=len(clusters)),
            )
            within = np.flatnonzero(distances <= radius)
            if within.size:
                target = clusters[int(within[0])]

        if target is None:
            clusters.append(Cluster.seed(event, position.latitude, position.longitude))
        else:
            target.add(event, position.latitude, position.longitude)

    stats = {
        "input_event_count": input_count,
        "clustered_event_count": input_count - skipped,
        "skipped_event_count": skipped,
        "cluster_count": len(clusters),
    }
    return clusters, stats


def cluster_events(events: Iterable[Event], radius_km: float) -> list[Cluster]:
    clusters, _ = cluster_events_with_stats(events, radius_km)
    return clusters
