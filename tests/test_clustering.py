from __future__ import annotations

import logging
import math
from datetime import UTC, datetime

import numpy as np
import pytest

from quake_significance.clustering import cluster_events, cluster_events_with_stats
from quake_significance.coordinates import parse_coordinates
from quake_significance.models import Cluster, Event
from quake_significance.utils import haversine_km_to_many

NOW = datetime(2024, 9, 10, tzinfo=UTC)


def _event(event_id: str, lat: str, lon: str, magnitude: float = 4.0, region: str = "Laut Jawa") -> Event:
    return Event(
        event_id=event_id,
        latitude_raw=lat,
        longitude_raw=lon,
        magnitude=magnitude,
        depth_km=10.0,
        region=region,
        timestamp=NOW,
    )


def test_haversine_one_degree_on_equator() -> None:
    distances = haversine_km_to_many(0.0, 0.0, np.array([0.0, 0.0, 1.0]), np.array([1.0, 0.0, 0.0]))
    assert distances[0] == pytest.approx(111.19, abs=0.01)
    assert distances[1] == 0.0
    assert distances[2] == pytest.approx(distances[0])


def test_empty_input_gives_no_clusters() -> None:
    assert cluster_events([], 200) == []


def test_incremental_centroid_and_magnitude_totals() -> None:
    clusters = cluster_events(
        [_event("a", "0", "0", magnitude=4.0), _event("b", "0", "1 BT", magnitude=5.0)],
        200,
    )
    assert len(clusters) == 1
    cluster = clusters[0]
    assert cluster.member_count == 2
    assert cluster.member_magnitudes == [4.0, 5.0]
    assert cluster.total_magnitude == pytest.approx(9.0)
    assert cluster.mean_magnitude == pytest.approx(4.5)
    assert cluster.centroid_latitude == pytest.approx(0.0)
    assert cluster.centroid_longitude == pytest.approx(0.5)
    assert cluster.member_ids == ["a", "b"]


def test_invalid_coordinates_are_skipped_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    events = [
        _event("good", "6.2 LS", "106.8 BT"),
        _event("bad", "abc", "106.8 BT"),
        _event("worse", "6.2 LS", ""),
    ]
    with caplog.at_level(logging.WARNING, logger="quake_significance.clustering"):
        clusters, stats = cluster_events_with_stats(events, 200)

    assert [cluster.member_ids for cluster in clusters] == [["good"]]
    assert stats == {
        "input_event_count": 3,
        "clustered_event_count": 1,
        "skipped_event_count": 2,
        "cluster_count": 1,
    }
    assert "'abc'" in caplog.text
    assert "bad" in caplog.text


def test_every_valid_event_lands_in_exactly_one_cluster() -> None:
    events = [
        _event("jkt1", "6.2 LS", "106.8 BT"),
        _event("bdg", "6.9 LS", "107.6 BT"),
        _event("bad", "n/a", "107.6 BT"),
        _event("jpr", "2.5 LS", "140.7 BT"),
        _event("mdn", "3.6 LU", "98.7 BT"),
        _event("jkt2", "6.3 LS", "106.9 BT"),
        _event("jpr2", "2.6 LS", "140.5 BT"),
    ]
    clusters = cluster_events(events, 200)

    member_ids = [event_id for cluster in clusters for event_id in cluster.member_ids]
    assert sorted(member_ids) == sorted(e.event_id for e in events if e.event_id != "bad")
    assert len(member_ids) == len(set(member_ids))
    assert sum(cluster.member_count for cluster in clusters) == 6
    for cluster in clusters:
        assert cluster.member_count == len(cluster.member_magnitudes)


def test_centroid_stays_inside_member_bounds() -> None:
    events = [
        _event("e1", "6.0 LS", "106.0 BT"),
        _event("e2", "6.8 LS", "106.9 BT"),
        _event("e3", "5.9 LS", "107.2 BT"),
        _event("e4", "7.1 LS", "106.4 BT"),
        _event("e5", "6.4 LS", "107.5 BT"),
    ]
    positions = {e.event_id: parse_coordinates(e.latitude_raw, e.longitude_raw) for e in events}
    for cluster in cluster_events(events, 250):
        lats = [positions[event_id].latitude for event_id in cluster.member_ids]
        lons = [positions[event_id].longitude for event_id in cluster.member_ids]
        assert min(lats) <= cluster.centroid_latitude <= max(lats)
        assert min(lons) <= cluster.centroid_longitude <= max(lons)


def test_input_order_changes_the_result() -> None:
    # Three points on the equator roughly 100 km apart, radius 160 km.
    a = _event("A", "0", "0")
    b = _event("B", "0", "0.9 BT")
    c = _event("C", "0", "1.8 BT")

    # A then B moves the centroid to 0.45E, which brings C within range.
    in_line = cluster_events([a, b, c], 160)
    assert [cluster.member_ids for cluster in in_line] == [["A", "B", "C"]]

    # C arrives while the first centroid is still at A (200 km away).
    reordered = cluster_events([a, c, b], 160)
    assert [cluster.member_ids for cluster in reordered] == [["A", "B"], ["C"]]


def test_first_cluster_within_radius_wins_over_nearest() -> None:
    west = _event("west", "0", "0")
    east = _event("east", "0", "2.0 BT")
    between = _event("between", "0", "1.1 BT")

    clusters = cluster_events([west, east, between], 150)
    # "between" is ~122 km from west and ~100 km from east; west was created first.
    assert [cluster.member_ids for cluster in clusters] == [["west", "between"], ["east"]]


def test_zero_radius_only_merges_identical_positions() -> None:
    clusters = cluster_events(
        [_event("a", "1 LS", "120 BT"), _event("b", "1 LS", "120 BT"), _event("c", "1.01 LS", "120 BT")],
        0,
    )
    assert [cluster.member_count for cluster in clusters] == [2, 1]


def test_clustering_is_deterministic() -> None:
    events = [_event(f"e{i}", f"{6 + i * 0.7:.2f} LS", f"{106 + i * 0.9:.2f} BT") for i in range(12)]
    first = [cluster.as_dict() for cluster in cluster_events(events, 200)]
    second = [cluster.as_dict() for cluster in cluster_events(events, 200)]
    assert first == second


@pytest.mark.parametrize("radius", [-1, float("nan"), float("inf"), "far"])
def test_invalid_radius_is_rejected(radius: object) -> None:
    with pytest.raises(ValueError):
        cluster_events([_event("a", "0", "0")], radius)  # type: ignore[arg-type]


def test_cluster_summary_fields() -> None:
    events = [
        _event("a", "0", "0", magnitude=3.0, region="Laut Banda"),
        _event("b", "0", "0.1 BT", magnitude=6.0, region="Maluku"),
        _event("c", "0", "0.2 BT", magnitude=4.5, region="Maluku"),
    ]
    cluster = cluster_events(events, 200)[0]
    assert cluster.max_magnitude == 6.0
    assert cluster.region_hint == "Maluku"
    assert cluster.start_time == NOW
    assert cluster.as_dict()["event_count"] == 3


def test_cluster_without_members_reports_nan_magnitudes() -> None:
    cluster = Cluster(centroid_latitude=0.0, centroid_longitude=0.0)
    assert cluster.member_count == 0
    assert math.isnan(cluster.mean_magnitude)
    assert math.isnan(cluster.max_magnitude)
    summary = cluster.as_dict()
    assert summary["event_count"] == 0
    assert summary["region_hint"] == "unknown"
    assert summary["start_time_utc"] is None
