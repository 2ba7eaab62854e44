from __future__ import annotations

from datetime import UTC, datetime

import pytest

from quake_significance import build_significance_map, get_clusters, get_window
from quake_significance.models import Event

EPOCH = datetime(2024, 9, 1, tzinfo=UTC)
NOW = datetime(2024, 9, 20, tzinfo=UTC)


def _event(event_id: str, lat: str, lon: str, magnitude: float, timestamp: datetime) -> Event:
    return Event(
        event_id=event_id,
        latitude_raw=lat,
        longitude_raw=lon,
        magnitude=magnitude,
        depth_km=10.0,
        region="Jawa Barat",
        timestamp=timestamp,
    )


def _events() -> list[Event]:
    return [
        _event("w0-a", "6.2 LS", "106.8 BT", 4.0, datetime(2024, 9, 2, tzinfo=UTC)),
        _event("w0-b", "6.5 LS", "107.0 BT", 6.0, datetime(2024, 9, 3, tzinfo=UTC)),
        _event("w0-c", "2.5 LS", "140.7 BT", 5.0, datetime(2024, 9, 4, tzinfo=UTC)),
        _event("edge", "6.3 LS", "106.9 BT", 5.0, datetime(2024, 9, 8, tzinfo=UTC)),
        _event("w2", "3.6 LU", "98.7 BT", 3.0, datetime(2024, 9, 16, tzinfo=UTC)),
    ]


def test_get_window_validates_against_now() -> None:
    window = get_window(2, epoch_start=EPOCH, now=NOW)
    assert window.start == datetime(2024, 9, 15, tzinfo=UTC)
    assert window.end == datetime(2024, 9, 22, tzinfo=UTC)
    with pytest.raises(ValueError, match="out of range"):
        get_window(3, epoch_start=EPOCH, now=NOW)


def test_get_clusters_for_selected_week() -> None:
    clusters = get_clusters(_events(), 0, epoch_start=EPOCH, radius_km=200, now=NOW)
    assert [cluster.member_ids for cluster in clusters] == [["w0-a", "w0-b", "edge"], ["w0-c"]]
    assert clusters[0].mean_magnitude == pytest.approx(5.0)


def test_boundary_event_shows_up_in_next_week_too() -> None:
    clusters = get_clusters(_events(), 1, epoch_start=EPOCH, radius_km=200, now=NOW)
    assert [cluster.member_ids for cluster in clusters] == [["edge"]]


def test_empty_event_list_gives_empty_map() -> None:
    significance = build_significance_map([], 0, epoch_start=EPOCH, now=NOW)
    assert significance.markers == []
    assert significance.stats["cluster_count"] == 0
    assert significance.stats["window_event_count"] == 0


def test_markers_carry_color_and_radius() -> None:
    significance = build_significance_map(_events(), 0, epoch_start=EPOCH, radius_km=200, now=NOW)
    marker = significance.markers[0]
    assert marker.color == (105, 90, 70)
    assert marker.css_color == "rgb(105,90,70)"
    assert marker.visual_radius == pytest.approx(15.0)
    assert marker.as_dict()["event_count"] == 3


def test_each_call_recomputes_from_scratch() -> None:
    events = _events()
    first = get_clusters(events, 0, epoch_start=EPOCH, radius_km=200, now=NOW)
    second = get_clusters(events, 0, epoch_start=EPOCH, radius_km=200, now=NOW)
    assert first[0] is not second[0]
    assert first[0].as_dict() == second[0].as_dict()
