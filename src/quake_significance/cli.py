from __future__ import annotations

import argparse
import json
from collections.abc import Sequence
from datetime import date

from .config import Settings
from .filters import EventFilter, filter_events
from .logging_utils import configure_logging
from .pipeline import load_events, run_significance
from .summary_feed import events_frame


def run_significance_command(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Cluster one week of earthquakes and write the summary feed.")
    parser.add_argument("--week", type=int, default=None, help="week index from EPOCH_START (default: latest)")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    result = run_significance(settings, week_index=args.week)
    print(json.dumps(result, indent=2))


def run_events_command(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="List earthquakes matching date, magnitude and depth bounds.")
    parser.add_argument("--from-date", type=date.fromisoformat, default=None)
    parser.add_argument("--to-date", type=date.fromisoformat, default=None)
    parser.add_argument("--min-magnitude", type=float, default=None)
    parser.add_argument("--max-magnitude", type=float, default=None)
    parser.add_argument("--min-depth", type=float, default=None)
    parser.add_argument("--max-depth", type=float, default=None)
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    event_filter = EventFilter(
        from_date=args.from_date,
        to_date=args.to_date,
        min_magnitude=args.min_magnitude,
        max_magnitude=args.max_magnitude,
        min_depth=args.min_depth,
        max_depth=args.max_depth,
    )
    matched = filter_events(load_events(settings).events, event_filter)
    frame = events_frame(matched)
    print(frame.to_json(orient="records", date_format="iso", indent=2))
