from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import requests

from .logging_utils import get_logger
from .validation import validate_feed_shape

logger = get_logger("quake_significance.ingest")


def _load_json_from_file(path_value: str) -> Any:
    parsed = urlparse(path_value)
    if parsed.scheme == "file":
        file_path = Path(unquote(parsed.path))
    else:
        file_path = Path(path_value)

    if not file_path.exists():
        raise FileNotFoundError(f"Earthquake export not found: {file_path}")
    with file_path.open("r", encoding="utf-8") as file:
        return json.load(file)


def _records_from_payload(payload: Any) -> list[dict[str, Any]]:
    errors = validate_feed_shape(payload)
    if errors:
        raise ValueError(f"Feed validation failed: {errors}")
    return list(payload if isinstance(payload, list) else payload["data"])


def fetch_records(source: str, timeout_seconds: int = 30) -> list[dict[str, Any]]:
    """Load raw event records from a JSON export path or an HTTP(S) URL.

    The payload may be a bare list of records or an object holding them under
    ``"data"``. Authentication and de-duplication happen upstream.
    """
    lower = source.lower()
    if lower.startswith("http://") or lower.startswith("https://"):
        response = requests.get(source, timeout=timeout_seconds)
        response.raise_for_status()
        payload = response.json()
    else:
        payload = _load_json_from_file(source)

    records = _records_from_payload(payload)
    logger.info("Fetched %s raw records from %s", len(records), source)
    return records
