"""tracker_summary.py

Print a trend summary for one tracker view and save the bucketed series
to CSV/JSON.

Usage: python tracker_summary.py [data_file] [--source expenses] [--window month]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from analytics import (
    DEFAULT_TOP_N,
    build_analytics_payload,
    print_summary_report,
    save_analytics_files,
)
from calendar_math import WINDOW_KEYS, AnalyticsError, explicit_window
from records import SOURCES, budgets_for_source, load_tracker_data, records_for_source

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarise tracker records over a time window")
    parser.add_argument("data_file", nargs="?", default="tracker_data.json",
                        help="Path to the tracker export JSON (default: tracker_data.json)")
    parser.add_argument("--source", "-s", choices=list(SOURCES), default="expenses",
                        help="Tracker view to summarise (default: expenses)")
    parser.add_argument("--window", "-w", choices=list(WINDOW_KEYS), default="month",
                        help="Symbolic window ending today (default: month)")
    parser.add_argument("--start", help="Explicit window start (YYYY-MM-DD); requires --end")
    parser.add_argument("--end", help="Explicit window end (YYYY-MM-DD); requires --start")
    parser.add_argument("--top-n", "-n", type=int, default=DEFAULT_TOP_N,
                        help=f"Named categories to show before 'other' (default: {DEFAULT_TOP_N})")
    parser.add_argument("--output-dir", "-o", default="tracker_analytics",
                        help="Directory for series.csv/json and summary.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log skipped records")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point; exits with code 1 on unreadable input or a bad window."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")

    try:
        data = load_tracker_data(args.data_file)
    except FileNotFoundError:
        print(f"Error: File '{args.data_file}' not found.", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError:
        print(f"Error: '{args.data_file}' is not a valid JSON file.", file=sys.stderr)
        sys.exit(1)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        window = explicit_window(args.start, args.end) if args.start is not None else args.window
        records = records_for_source(data, args.source)
        payload = build_analytics_payload(
            records, window, top_n=args.top_n, budgets=budgets_for_source(data, args.source),
        )
    except AnalyticsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    save_analytics_files(payload, args.output_dir)
    print_summary_report(payload, args.source)
    print(f"\nSeries and summary saved to the '{args.output_dir}' directory.")


if __name__ == "__main__":
    main()
