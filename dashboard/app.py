from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pandas as pd
import plotly.express as px
import streamlit as st
from streamlit_autorefresh import st_autorefresh

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from quake_significance.config import Settings
from quake_significance.filters import (
    DEPTH_LIMITS,
    MAGNITUDE_LIMITS,
    EventFilter,
    bounds_from_range,
    filter_events,
)
from quake_significance.pipeline import load_events
from quake_significance.significance import build_significance_map
from quake_significance.summary_feed import clusters_frame, event_positions_frame
from quake_significance.windows import compute_window, total_windows

st.set_page_config(
    page_title="Earthquake Significance Map",
    page_icon="🌏",
    layout="wide",
)

settings = Settings.from_env()
st_autorefresh(interval=settings.refresh_interval_seconds * 1000, key="eq_refresh")

MAP_CENTER = {"lat": -2.5489, "lon": 118.0149}


@st.cache_data(ttl=60)
def load_event_list(source: str):
    return load_events(settings).events


try:
    events = load_event_list(settings.source)
except (OSError, ValueError) as exc:
    st.error(f"Failed to fetch earthquake data: {exc}")
    st.stop()

view = st.sidebar.radio("View", ["Event map", "Weekly significance"])

if view == "Event map":
    st.title("Earthquake Event Map")
    today = datetime.now(tz=UTC).date()
    date_range = st.sidebar.date_input("Date range", value=(today - timedelta(days=7), today))
    from_date, to_date = (date_range if len(date_range) == 2 else (date_range[0], date_range[0]))
    magnitude_range = st.sidebar.slider("Magnitude", MAGNITUDE_LIMITS[0], MAGNITUDE_LIMITS[1], MAGNITUDE_LIMITS, 0.1)
    depth_range = st.sidebar.slider("Depth (km)", DEPTH_LIMITS[0], DEPTH_LIMITS[1], DEPTH_LIMITS, 5.0)
    min_magnitude, max_magnitude = bounds_from_range(magnitude_range, MAGNITUDE_LIMITS)
    min_depth, max_depth = bounds_from_range(depth_range, DEPTH_LIMITS)
    try:
        event_filter = EventFilter(
            from_date=from_date,
            to_date=to_date,
            min_magnitude=min_magnitude,
            max_magnitude=max_magnitude,
            min_depth=min_depth,
            max_depth=max_depth,
        )
    except ValueError as exc:
        st.warning(str(exc))
        st.stop()

    frame = event_positions_frame(filter_events(events, event_filter))
    if frame.empty:
        st.info("No events match the selected filters.")
        st.stop()

    st.caption(f"{len(frame)} events between {from_date} and {to_date}")
    fig = px.scatter_mapbox(
        frame,
        lat="latitude",
        lon="longitude",
        color="magnitude",
        zoom=3.5,
        center=MAP_CENTER,
        hover_name="region",
        hover_data={"timestamp": True, "magnitude": ":.1f", "depth_km": ":.0f", "latitude": False, "longitude": False},
        color_continuous_scale="Reds",
        height=640,
    )
    fig.update_layout(mapbox_style="open-street-map", margin=dict(l=0, r=0, t=0, b=0))
    st.plotly_chart(fig, use_container_width=True)
else:
    st.title("Aggregated Earthquakes (Weekly)")
    now_utc = datetime.now(tz=UTC)
    week_count = total_windows(settings.epoch_start, now_utc)
    if week_count == 0:
        st.info("No weeks have elapsed since the configured epoch start.")
        st.stop()

    week = st.sidebar.slider("Week", 1, week_count, week_count) - 1
    window = compute_window(settings.epoch_start, week)
    st.caption(
        f"Week {week + 1} ({window.start:%d/%m/%Y} - {window.end:%d/%m/%Y}), "
        f"clustered within {settings.cluster_radius_km:.0f} km"
    )

    significance = build_significance_map(
        events,
        week,
        epoch_start=settings.epoch_start,
        radius_km=settings.cluster_radius_km,
        now=now_utc,
    )
    clusters = clusters_frame(significance)
    if clusters.empty:
        st.info("No earthquakes with valid coordinates in this week.")
        st.stop()

    fig = px.scatter_mapbox(
        clusters,
        lat="centroid_lat",
        lon="centroid_lon",
        size="visual_radius",
        size_max=30,
        zoom=3.5,
        center=MAP_CENTER,
        hover_name="region_hint",
        hover_data={"mean_magnitude": ":.2f", "event_count": True, "centroid_lat": False, "centroid_lon": False},
        height=640,
    )
    fig.update_traces(marker=dict(color=clusters["css_color"].tolist(), opacity=0.8))
    fig.update_layout(mapbox_style="open-street-map", margin=dict(l=0, r=0, t=0, b=0))
    st.plotly_chart(fig, use_container_width=True)

    stats_col, table_col = st.columns([1, 2])
    with stats_col:
        st.metric("Events in week", significance.stats["window_event_count"])
        st.metric("Clusters", significance.stats["cluster_count"])
        st.metric("Skipped (bad coordinates)", significance.stats["skipped_event_count"])
    with table_col:
        st.dataframe(
            pd.DataFrame(clusters[["region_hint", "event_count", "mean_magnitude", "max_magnitude"]]),
            use_container_width=True,
            hide_index=True,
        )
