from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .coordinates import parse_coordinates
from .models import Event
from .utils import parse_depth_km, to_float, to_utc

# Feed field names first, English aliases after.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "event_id": ("_id", "id", "event_id"),
    "latitude_raw": ("lintang", "latitude", "lat"),
    "longitude_raw": ("bujur", "longitude", "lon"),
    "magnitude": ("magnitude", "mag"),
    "depth_km": ("kedalaman", "depth_km", "depth"),
    "region": ("wilayah", "region", "place"),
    "timestamp": ("datetime", "timestamp", "time"),
}


@dataclass
class NormalizationResult:
    event: Event | None
    hard_errors: list[str]
    soft_warnings: list[str]


def validate_feed_shape(payload: Any) -> list[str]:
    errors: list[str] = []
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict):
        if "data" not in payload:
            errors.append("payload.data missing")
            return errors
        records = payload["data"]
    else:
        errors.append("payload is neither a list nor an object")
        return errors
    if not isinstance(records, list):
        errors.append("payload.data is not a list")
    return errors


def lookup_field(record: dict[str, Any], field_name: str) -> Any:
    for key in FIELD_ALIASES[field_name]:
        if record.get(key) is not None:
            return record[key]
    return None


def normalize_record(record: Any) -> NormalizationResult:
    hard_errors: list[str] = []
    soft_warnings: list[str] = []

    if not isinstance(record, dict):
        return NormalizationResult(event=None, hard_errors=["record_not_object"], soft_warnings=[])

    event_id = lookup_field(record, "event_id")
    if event_id is None or not str(event_id).strip():
        hard_errors.append("missing_event_id")

    magnitude = to_float(lookup_field(record, "magnitude"))
    if magnitude is None:
        hard_errors.append("invalid_magnitude")
    elif not (-3.0 <= magnitude <= 10.0):
        soft_warnings.append("magnitude_outside_expected_range")

    timestamp = to_utc(lookup_field(record, "timestamp"))
    if timestamp is None:
        hard_errors.append("invalid_timestamp")

    depth = parse_depth_km(lookup_field(record, "depth_km"))
    if depth is None:
        soft_warnings.append("invalid_depth")
    elif not (-20 <= depth <= 800):
        soft_warnings.append("depth_outside_typical_range")

    latitude_raw = lookup_field(record, "latitude_raw")
    longitude_raw = lookup_field(record, "longitude_raw")
    # Unparseable coordinates stay on the event; the clusterer skips them.
    if not parse_coordinates(latitude_raw, longitude_raw).is_valid:
        soft_warnings.append("invalid_coordinates")

    if hard_errors:
        return NormalizationResult(event=None, hard_errors=hard_errors, soft_warnings=soft_warnings)

    region = lookup_field(record, "region")
    event = Event(
        event_id=str(event_id).strip(),
        latitude_raw="" if latitude_raw is None else str(latitude_raw),
        longitude_raw="" if longitude_raw is None else str(longitude_raw),
        magnitude=float(magnitude),
        depth_km=depth if depth is not None else math.nan,
        region=str(region).strip() if region is not None else "",
        timestamp=timestamp,
    )
    return NormalizationResult(event=event, hard_errors=hard_errors, soft_warnings=soft_warnings)
