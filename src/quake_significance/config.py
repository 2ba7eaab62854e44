from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from .utils import to_utc

DEFAULT_EPOCH_START = "2024-09-01"
DEFAULT_CLUSTER_RADIUS_KM = 200.0


@dataclass(frozen=True)
class Settings:
    source: str
    epoch_start: datetime
    cluster_radius_km: float
    request_timeout_seconds: int
    refresh_interval_seconds: int
    output_dir: Path
    summary_feed_path: Path
    summary_geojson_path: Path
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        output_dir = Path(os.getenv("OUTPUT_DIR", "output"))

        epoch_raw = os.getenv("EPOCH_START", DEFAULT_EPOCH_START)
        epoch_start = to_utc(epoch_raw)
        if epoch_start is None:
            raise ValueError(f"EPOCH_START is not a valid date: {epoch_raw!r}")

        radius_km = float(os.getenv("CLUSTER_RADIUS_KM", str(DEFAULT_CLUSTER_RADIUS_KM)))
        if radius_km < 0:
            raise ValueError(f"CLUSTER_RADIUS_KM must be >= 0, got {radius_km}")

        settings = cls(
            source=os.getenv("EARTHQUAKE_SOURCE", "data/earthquakes.json"),
            epoch_start=epoch_start,
            cluster_radius_km=radius_km,
            request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30")),
            refresh_interval_seconds=int(os.getenv("REFRESH_INTERVAL_SECONDS", "300")),
            output_dir=output_dir,
            summary_feed_path=Path(
                os.getenv("SUMMARY_FEED_PATH", str(output_dir / "significance_feed.json"))
            ),
            summary_geojson_path=Path(
                os.getenv("SUMMARY_GEOJSON_PATH", str(output_dir / "significance_clusters.geojson"))
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
        settings.output_dir.mkdir(parents=True, exist_ok=True)
        settings.summary_feed_path.parent.mkdir(parents=True, exist_ok=True)
        settings.summary_geojson_path.parent.mkdir(parents=True, exist_ok=True)
        return settings
