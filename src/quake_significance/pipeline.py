from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .config import Settings
from .ingest import fetch_records
from .logging_utils import configure_logging, get_logger
from .models import Event
from .significance import build_significance_map
from .summary_feed import build_clusters_geojson, build_summary_feed, write_json
from .validation import lookup_field, normalize_record
from .windows import latest_week_index


@dataclass
class LoadResult:
    events: list[Event]
    rejected: list[dict[str, Any]] = field(default_factory=list)
    warning_count: int = 0


def normalize_records(records: list[Any]) -> LoadResult:
    logger = get_logger("quake_significance.pipeline")
    result = LoadResult(events=[])
    for index, record in enumerate(records):
        normalized = normalize_record(record)
        if normalized.event is None:
            result.rejected.append(
                {
                    "index": index,
                    "id": lookup_field(record, "event_id") if isinstance(record, dict) else None,
                    "errors": normalized.hard_errors,
                    "warnings": normalized.soft_warnings,
                }
            )
            continue
        result.warning_count += len(normalized.soft_warnings)
        result.events.append(normalized.event)

    logger.info(
        "Normalized records: accepted=%s rejected=%s warnings=%s",
        len(result.events),
        len(result.rejected),
        result.warning_count,
    )
    return result


def load_events(settings: Settings) -> LoadResult:
    records = fetch_records(settings.source, timeout_seconds=settings.request_timeout_seconds)
    return normalize_records(records)


def run_significance(
    settings: Settings | None = None,
    *,
    week_index: int | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    logger = get_logger("quake_significance.pipeline")
    now_utc = now or datetime.now(tz=UTC)
    logger.info("Significance run started at %s", now_utc.isoformat())

    try:
        loaded = load_events(settings)
        if week_index is None:
            week_index = latest_week_index(settings.epoch_start, now_utc)

        significance = build_significance_map(
            loaded.events,
            week_index,
            epoch_start=settings.epoch_start,
            radius_km=settings.cluster_radius_km,
            now=now_utc,
        )
        logger.info(
            "Week %s (%s - %s): events=%s clusters=%s skipped=%s",
            significance.window.index,
            significance.window.start.date(),
            significance.window.end.date(),
            significance.stats["window_event_count"],
            significance.stats["cluster_count"],
            significance.stats["skipped_event_count"],
        )

        summary = build_summary_feed(
            now_utc=now_utc,
            source=settings.source,
            significance=significance,
            events=loaded.events,
            epoch_start=settings.epoch_start,
            rejected_count=len(loaded.rejected),
            warning_count=loaded.warning_count,
        )
        write_json(summary, settings.summary_feed_path)
        write_json(build_clusters_geojson(significance), settings.summary_geojson_path)
    except Exception:
        logger.exception("Significance run failed")
        raise

    return {
        "status": "success",
        "week_index": significance.window.index,
        "window": significance.window.as_dict(),
        "accepted_count": len(loaded.events),
        "rejected_count": len(loaded.rejected),
        "warning_count": loaded.warning_count,
        "cluster_count": significance.stats["cluster_count"],
        "summary_feed_path": str(settings.summary_feed_path),
        "summary_geojson_path": str(settings.summary_geojson_path),
    }
