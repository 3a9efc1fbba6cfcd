"""Time-series aggregation and trend analytics for tracker records.

Takes a collection of dated records and a window, and produces a
gap-free bucketed series plus derived statistics: period totals,
category breakdowns, period-over-period comparison, trend, streaks and
top-N category collapsing.  Used by both the CLI (tracker_summary.py)
and the web service (app.py).

Everything here is pure: inputs are never mutated and the only clock
read is resolving "today" once per call when no reference date is given.
"""

from __future__ import annotations

import csv
import json
import logging
import os
from dataclasses import dataclass, field, replace
from datetime import date
from functools import reduce
from typing import Any, Iterable, Literal, Mapping

from calendar_math import (
    ALL_WINDOW,
    AnalyticsError,
    InvalidWindow,
    UnparseableRecordDate,
    Window,
    add_days,
    day_key,
    days_between,
    month_end,
    month_key,
    month_start,
    parse_calendar_date,
    resolve_window,
    today,
    week_start,
)
from records import UNCATEGORIZED, Record, coerce_records

logger = logging.getLogger(__name__)

Granularity = Literal["day", "week", "month"]
DAY: Granularity = "day"
WEEK: Granularity = "week"
MONTH: Granularity = "month"

# Window span (end - start, in days) up to which each granularity is used.
DAY_MAX_SPAN = 30
WEEK_MAX_SPAN = 180

OTHER = "other"
DEFAULT_TOP_N = 5

INCREASE = "increase"
DECREASE = "decrease"
FLAT = "flat"

_MONTH_ABBR = (
    "", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Bucket:
    period_key: str
    period_start: date
    period_end: date
    display_label: str
    total: float = 0
    by_category: dict[str, float] = field(default_factory=dict)
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "period_key": self.period_key,
            "period_start": day_key(self.period_start),
            "period_end": day_key(self.period_end),
            "display_label": self.display_label,
            "total": self.total,
            "by_category": dict(self.by_category),
            "count": self.count,
        }


@dataclass(frozen=True)
class Series:
    """Ordered buckets covering ``window`` at one granularity."""

    window: Window
    granularity: Granularity
    buckets: tuple[Bucket, ...]

    def __len__(self) -> int:
        return len(self.buckets)

    def __iter__(self):
        return iter(self.buckets)

    @property
    def totals(self) -> list[float]:
        return [b.total for b in self.buckets]


@dataclass(frozen=True)
class Comparison:
    current_total: float
    previous_total: float
    delta: float
    delta_percent: float | None
    direction: str
    comparable: bool
    previous_window: Window | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_total": self.current_total,
            "previous_total": self.previous_total,
            "delta": self.delta,
            "delta_percent": self.delta_percent,
            "direction": self.direction,
            "comparable": self.comparable,
            "previous_window": (
                self.previous_window.to_dict() if self.previous_window else None
            ),
        }


@dataclass(frozen=True)
class Trend:
    first_half_average: float
    second_half_average: float
    percent_change: float

    def to_dict(self) -> dict[str, float]:
        return {
            "first_half_average": self.first_half_average,
            "second_half_average": self.second_half_average,
            "percent_change": self.percent_change,
        }


# ---------------------------------------------------------------------------
# Record preparation
# ---------------------------------------------------------------------------

def _dated_records(
    records: Iterable[Record | Mapping[str, Any]],
) -> list[tuple[date, Record]]:
    """Pair each record with its parsed calendar date.

    Records whose date cannot be parsed are logged and dropped; one bad
    record never fails the whole aggregation.

    Args:
        records: Record objects or record-shaped mappings.

    Returns:
        List of (calendar_date, record) tuples in input order.
    """
    dated: list[tuple[date, Record]] = []
    skipped = 0
    for record in coerce_records(records):
        try:
            dated.append((parse_calendar_date(record.date), record))
        except UnparseableRecordDate as exc:
            skipped += 1
            logger.warning("Skipping record: %s", exc)
    if skipped:
        logger.info("Skipped %d record(s) with unparseable dates", skipped)
    return dated


def _window_total(dated: list[tuple[date, Record]], window: Window) -> float:
    return sum(r.value for d, r in dated if window.contains(d))


def _safe_div(num: float, den: float, default: float = 0.0) -> float:
    """Safe division returning *default* when denominator is zero.

    Returns:
        ``round(num / den, 2)`` when *den* is truthy, otherwise *default*.
    """
    return round(num / den, 2) if den else default


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ---------------------------------------------------------------------------
# Granularity & bucketing
# ---------------------------------------------------------------------------

def select_granularity(window: Window) -> Granularity:
    """Pick the bucket size for a window from its span in days.

    A span (``end - start``) of up to 30 days is bucketed by day, up to
    180 days by week, anything longer by month.

    Raises:
        InvalidWindow: If the window ends before it starts.
    """
    span = days_between(window.start, window.end)
    if span < 0:
        raise InvalidWindow(f"Window ends before it starts: {window.start} > {window.end}")
    if span <= DAY_MAX_SPAN:
        return DAY
    if span <= WEEK_MAX_SPAN:
        return WEEK
    return MONTH


def period_bounds(d: date, granularity: Granularity) -> tuple[str, date, date]:
    """Return (period_key, first_day, last_day) of the period containing *d*.

    Weeks run Monday to Sunday and are keyed by their Monday's day key;
    months are keyed "YYYY-MM".  Keys sort chronologically as strings.

    Raises:
        AnalyticsError: If *granularity* is not day, week or month.
    """
    if granularity == DAY:
        return day_key(d), d, d
    if granularity == WEEK:
        monday = week_start(d)
        return day_key(monday), monday, add_days(monday, 6)
    if granularity == MONTH:
        return month_key(d), month_start(d), month_end(d)
    raise AnalyticsError(f"Unknown granularity: {granularity!r}")


def period_key(d: date, granularity: Granularity) -> str:
    return period_bounds(d, granularity)[0]


def _short_day(d: date) -> str:
    return f"{_MONTH_ABBR[d.month]} {d.day}"


def _display_label(start: date, end: date, granularity: Granularity) -> str:
    if granularity == MONTH:
        return f"{_MONTH_ABBR[start.month]} '{start.year % 100:02d}"
    if start == end:
        return _short_day(start)
    if start.month == end.month:
        return f"{_short_day(start)}–{end.day}"
    return f"{_short_day(start)}–{_short_day(end)}"


def bucket(window: Window, granularity: Granularity) -> Series:
    """Build the empty, contiguous bucket skeleton for a window.

    Walks from ``window.start`` to ``window.end`` one period at a time.
    The first and last period are clipped to the window, so the buckets
    partition it exactly: no gaps, no overlaps, ascending order.

    Args:
        window: Inclusive range to cover.
        granularity: Period size ("day", "week" or "month").

    Returns:
        A Series whose buckets all have zero totals and empty category
        maps.

    Raises:
        AnalyticsError: If *granularity* is unknown.
    """
    buckets: list[Bucket] = []
    cursor = window.start
    while True:
        key, start, end = period_bounds(cursor, granularity)
        start = max(start, window.start)
        end = min(end, window.end)
        buckets.append(Bucket(key, start, end, _display_label(start, end, granularity)))
        if end >= window.end:
            break
        cursor = add_days(end, 1)
    return Series(window=window, granularity=granularity, buckets=tuple(buckets))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _fold_record(acc: Bucket, record: Record) -> Bucket:
    """Return a new bucket with *record* added; *acc* is left untouched."""
    category = record.category or UNCATEGORIZED
    return replace(
        acc,
        total=acc.total + record.value,
        by_category={
            **acc.by_category,
            category: acc.by_category.get(category, 0) + record.value,
        },
        count=acc.count + 1,
    )


def _aggregate_dated(dated: list[tuple[date, Record]], skeleton: Series) -> Series:
    window = skeleton.window
    grouped: dict[str, list[Record]] = {}
    for d, record in dated:
        if window.contains(d):
            grouped.setdefault(period_key(d, skeleton.granularity), []).append(record)

    known = {b.period_key for b in skeleton.buckets}
    stray = sorted(set(grouped) - known)
    if stray:
        raise AnalyticsError(f"Records fell outside the bucket skeleton: {stray}")

    buckets = tuple(
        reduce(_fold_record, grouped.get(b.period_key, ()), b)
        for b in skeleton.buckets
    )
    return replace(skeleton, buckets=buckets)


def aggregate(
    records: Iterable[Record | Mapping[str, Any]],
    skeleton: Series,
) -> Series:
    """Fold records into a bucket skeleton.

    Records outside the skeleton's window are ignored and records with
    unparseable dates are logged and skipped.  Each remaining record adds
    its value to its bucket's total and to the bucket's category subtotal
    (``"uncategorized"`` when the record has no category), and bumps the
    bucket's count.  Bucket order is the skeleton's order.

    Args:
        records: Record objects or record-shaped mappings.
        skeleton: Output of :func:`bucket`.

    Returns:
        A new Series; *skeleton* is not modified.
    """
    return _aggregate_dated(_dated_records(records), skeleton)


def build_series(
    records: Iterable[Record | Mapping[str, Any]],
    window: Window | str,
    reference_date: date | None = None,
) -> Series:
    """Select granularity, build the skeleton and aggregate in one call."""
    dated = _dated_records(records)
    resolved = resolve_window(window, (d for d, _ in dated), reference_date)
    return _aggregate_dated(dated, bucket(resolved, select_granularity(resolved)))


def _merge_categories(acc: dict[str, float], b: Bucket) -> dict[str, float]:
    merged = dict(acc)
    for category, value in b.by_category.items():
        merged[category] = merged.get(category, 0) + value
    return merged


def category_totals(series: Series) -> dict[str, float]:
    """Sum the per-bucket category maps into one map for the whole series."""
    return reduce(_merge_categories, series.buckets, {})


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def _delta_percent(current: float, previous: float) -> float | None:
    if previous == 0:
        return None if current > 0 else 0
    return round((current - previous) / previous * 100, 2)


def _direction(delta: float) -> str:
    if delta > 0:
        return INCREASE
    if delta < 0:
        return DECREASE
    return FLAT


def _compare_dated(dated: list[tuple[date, Record]], window: Window) -> Comparison:
    current = _window_total(dated, window)
    not_comparable = Comparison(
        current_total=current,
        previous_total=0,
        delta=0,
        delta_percent=None,
        direction=FLAT,
        comparable=False,
    )
    if window.key == ALL_WINDOW:
        return not_comparable

    try:
        previous_window = Window(
            start=add_days(window.start, -window.length_days),
            end=add_days(window.start, -1),
        )
    except OverflowError:
        logger.debug("No preceding window before %s", window.start)
        return not_comparable

    previous = _window_total(dated, previous_window)
    delta = current - previous
    return Comparison(
        current_total=current,
        previous_total=previous,
        delta=delta,
        delta_percent=_delta_percent(current, previous),
        direction=_direction(delta),
        comparable=True,
        previous_window=previous_window,
    )


def compare_periods(
    records: Iterable[Record | Mapping[str, Any]],
    window: Window | str,
    reference_date: date | None = None,
) -> Comparison:
    """Compare a window's total with the equal-length window just before it.

    For a window of ``L`` days starting at ``S`` the previous window is
    ``[S - L, S - 1]``: same length, no overlap, immediately preceding.
    The "all" window has nothing to compare against and comes back with
    ``comparable=False``.

    ``delta_percent`` is ``delta / previous * 100`` rounded to 2dp.  When
    the previous total is zero it is ``None`` if the current total is
    positive (show the absolute delta only) and ``0`` otherwise.

    Args:
        records: Record objects or record-shaped mappings.  Not limited
            to the window; the previous window's records come from here.
        window: Concrete window or symbolic key.
        reference_date: "Today" for symbolic keys.

    Returns:
        The Comparison for the resolved window.
    """
    dated = _dated_records(records)
    resolved = resolve_window(window, (d for d, _ in dated), reference_date)
    return _compare_dated(dated, resolved)


# ---------------------------------------------------------------------------
# Trend
# ---------------------------------------------------------------------------

def compute_trend(series: Series) -> Trend:
    """Compare the average bucket total of the second half to the first.

    The split point is ``floor(n / 2)``, so for an odd number of buckets
    the extra one lands in the second half.  An empty half averages 0,
    and a zero first-half average gives a 0 percent change.
    """
    totals = series.totals
    mid = len(totals) // 2
    first = _mean(totals[:mid])
    second = _mean(totals[mid:])
    percent_change = round((second - first) / first * 100, 2) if first else 0.0
    return Trend(
        first_half_average=round(first, 2),
        second_half_average=round(second, 2),
        percent_change=percent_change,
    )


def compute_category_trends(series: Series) -> dict[str, float]:
    """Per-category percent change between the two halves of a series.

    Uses the same split as :func:`compute_trend` and compares average
    per-bucket amounts.  Categories with nothing in the first half are
    left out since their change is undefined.

    Returns:
        Dict mapping category to percent change (2dp), in the order the
        categories first appear in the series.
    """
    buckets = series.buckets
    mid = len(buckets) // 2
    first_half, second_half = buckets[:mid], buckets[mid:]
    trends: dict[str, float] = {}
    for category in category_totals(series):
        first = _mean([b.by_category.get(category, 0) for b in first_half])
        second = _mean([b.by_category.get(category, 0) for b in second_half])
        if first > 0:
            trends[category] = round((second - first) / first * 100, 2)
    return trends


def _rolling_avg(values: list[float], window: int) -> list[float]:
    """Compute rolling average, using available values when the window is not yet full.

    Args:
        values: Numeric series to smooth.
        window: Maximum number of trailing values to average.

    Returns:
        List of floats the same length as *values*.
    """
    result = []
    for i in range(len(values)):
        start = max(0, i - window + 1)
        w = values[start : i + 1]
        result.append(sum(w) / len(w))
    return result


def compute_rolling_average(values: list[float], window: int) -> list[float]:
    """Rolling average of *values*, each element rounded to 2dp."""
    if window < 1:
        raise AnalyticsError(f"Rolling window must be at least 1, got {window}")
    return [round(v, 2) for v in _rolling_avg(values, window)]


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------

def _current_streak(active_days: set[date], ref: date) -> int:
    streak = 0
    cursor = ref
    while cursor in active_days:
        streak += 1
        if cursor == date.min:
            break
        cursor = add_days(cursor, -1)
    return streak


def compute_streak(
    records: Iterable[Record | Mapping[str, Any]],
    reference_date: date | None = None,
) -> int:
    """Count consecutive days with activity, walking back from today.

    A day counts when at least one record falls on it.  The walk stops
    at the first day without one, so no record today means 0.

    Args:
        records: Record objects or record-shaped mappings; callers filter
            to qualifying records beforehand.
        reference_date: The day treated as "today".  Defaults to the
            actual current date, read once.

    Returns:
        The streak length in days.
    """
    ref = reference_date or today()
    return _current_streak({d for d, _ in _dated_records(records)}, ref)


def _longest_run(active_days: set[date]) -> int:
    longest = 0
    run = 0
    previous: date | None = None
    for d in sorted(active_days):
        run = run + 1 if previous is not None and days_between(previous, d) == 1 else 1
        longest = max(longest, run)
        previous = d
    return longest


def compute_longest_streak(records: Iterable[Record | Mapping[str, Any]]) -> int:
    """Longest run of consecutive active days anywhere in the records."""
    return _longest_run({d for d, _ in _dated_records(records)})


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def collapse_top_n(
    by_category: Mapping[str, float],
    n: int = DEFAULT_TOP_N,
) -> dict[str, float]:
    """Reduce a category map to its *n* largest entries plus "other".

    Categories are ranked by value, descending; equal values keep their
    original order.  The dropped categories are summed into ``"other"``,
    which is only added when something was dropped and the sum is
    positive.  If a kept category is itself called "other" the remainder
    is added to it.

    Args:
        by_category: Category -> amount, in insertion order.
        n: Number of named categories to keep.

    Returns:
        A new dict; *by_category* is not modified.

    Raises:
        AnalyticsError: If *n* is negative.
    """
    if n < 0:
        raise AnalyticsError(f"Top-N count must be non-negative, got {n}")
    ranked = sorted(by_category.items(), key=lambda item: item[1], reverse=True)
    kept = dict(ranked[:n])
    dropped = ranked[n:]
    remainder = sum(value for _, value in dropped)
    if dropped and remainder > 0:
        kept[OTHER] = kept.get(OTHER, 0) + remainder
    return kept


def find_unusual_records(
    records: Iterable[Record | Mapping[str, Any]],
    window: Window,
    factor: float = 2.0,
    limit: int = 3,
) -> list[dict[str, Any]]:
    """Find records far above their category's average within a window.

    Args:
        records: Record objects or record-shaped mappings.
        window: Only records dated inside it are considered.
        factor: A record is unusual when its value exceeds *factor*
            times the mean value of its category.
        limit: Maximum number of records to return.

    Returns:
        List of dicts (date, value, category), largest value first.
    """
    in_window = [(d, r) for d, r in _dated_records(records) if window.contains(d)]

    sums: dict[str, float] = {}
    counts: dict[str, int] = {}
    for _, r in in_window:
        category = r.category or UNCATEGORIZED
        sums[category] = sums.get(category, 0) + r.value
        counts[category] = counts.get(category, 0) + 1

    unusual = [
        (d, r) for d, r in in_window
        if r.value > factor * sums[r.category or UNCATEGORIZED] / counts[r.category or UNCATEGORIZED]
    ]
    unusual.sort(key=lambda pair: pair[1].value, reverse=True)
    return [
        {"date": day_key(d), "value": r.value, "category": r.category or UNCATEGORIZED}
        for d, r in unusual[:limit]
    ]


def compute_budget_status(
    by_category: Mapping[str, float],
    budgets: Mapping[str, float],
    threshold: float = 80.0,
) -> list[dict[str, Any]]:
    """List categories whose spend has reached *threshold* percent of budget.

    Budgets of zero or less are ignored.

    Returns:
        List of dicts (category, budget, spent, percentage), highest
        percentage first.
    """
    status = []
    for category, budget in budgets.items():
        if budget <= 0:
            continue
        spent = by_category.get(category, 0)
        percentage = round(spent / budget * 100, 2)
        if percentage >= threshold:
            status.append({
                "category": category,
                "budget": budget,
                "spent": spent,
                "percentage": percentage,
            })
    status.sort(key=lambda s: s["percentage"], reverse=True)
    return status


# ---------------------------------------------------------------------------
# Series statistics & payload
# ---------------------------------------------------------------------------

def compute_series_stats(series: Series) -> dict[str, Any]:
    """Compute headline statistics for a populated series.

    Args:
        series: Output of :func:`aggregate` or :func:`build_series`.

    Returns:
        Dict with keys:
            - total: sum of bucket totals.
            - count: number of records aggregated.
            - bucket_count / active_buckets: buckets overall and with at
              least one record.
            - average_per_bucket: total / bucket_count (2dp).
            - average_per_record: total / count (2dp, 0 when empty).
            - daily_average: total / window length in days (2dp).
            - best_period: dict (period_key, display_label, total) of the
              highest bucket, earliest on ties, or None when every bucket
              total is zero.
    """
    buckets = series.buckets
    total = sum(b.total for b in buckets)
    count = sum(b.count for b in buckets)

    best_period = None
    if any(b.total for b in buckets):
        best = max(buckets, key=lambda b: b.total)
        best_period = {
            "period_key": best.period_key,
            "display_label": best.display_label,
            "total": best.total,
        }

    return {
        "total": total,
        "count": count,
        "bucket_count": len(buckets),
        "active_buckets": sum(1 for b in buckets if b.count),
        "average_per_bucket": _safe_div(total, len(buckets)),
        "average_per_record": _safe_div(total, count),
        "daily_average": _safe_div(total, series.window.length_days),
        "best_period": best_period,
    }


def build_analytics_payload(
    records: Iterable[Record | Mapping[str, Any]],
    window: Window | str = "month",
    top_n: int = DEFAULT_TOP_N,
    reference_date: date | None = None,
    budgets: Mapping[str, float] | None = None,
) -> dict[str, Any]:
    """One-call entry point: compute every statistic for one window.

    This is the only function the service and the CLI need to call.
    Records are parsed once; "today" is resolved once and shared by the
    window resolution and the streak.

    Args:
        records: Record objects or record-shaped mappings.
        window: Concrete window or symbolic key ("week", "month",
            "3months", "6months", "year", "all").
        top_n: Number of named categories kept in "categories".
        reference_date: The day treated as "today".
        budgets: Optional category -> budget amount; categories at or
            above 80% of budget are listed under "budget_status".

    Returns:
        JSON-ready dict with keys: window, granularity, series (buckets
        and rolling averages), summary, comparison, trend,
        category_trends, categories, unusual_records, budget_status,
        streak, longest_streak.

    Raises:
        InvalidWindow: If *window* is unknown or ends before it starts.
        AnalyticsError: If *top_n* is negative.
    """
    ref = reference_date or today()
    dated = _dated_records(records)
    active_days = {d for d, _ in dated}
    resolved = resolve_window(window, active_days, ref)
    series = _aggregate_dated(dated, bucket(resolved, select_granularity(resolved)))
    totals = series.totals
    by_category = category_totals(series)
    in_window = [r for d, r in dated if resolved.contains(d)]

    return {
        "window": resolved.to_dict(),
        "granularity": series.granularity,
        "series": {
            "buckets": [b.to_dict() for b in series.buckets],
            "rolling_avg_3": compute_rolling_average(totals, 3),
            "rolling_avg_7": compute_rolling_average(totals, 7),
        },
        "summary": compute_series_stats(series),
        "comparison": _compare_dated(dated, resolved).to_dict(),
        "trend": compute_trend(series).to_dict(),
        "category_trends": compute_category_trends(series),
        "categories": collapse_top_n(by_category, top_n),
        "unusual_records": find_unusual_records(in_window, resolved),
        "budget_status": compute_budget_status(by_category, budgets or {}),
        "streak": _current_streak(active_days, ref),
        "longest_streak": _longest_run(active_days),
    }


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def save_analytics_files(payload: dict[str, Any], output_dir: str = "tracker_analytics") -> None:
    """Write series.json/csv and summary.json to *output_dir*.

    Args:
        payload: Output of :func:`build_analytics_payload`.
        output_dir: Directory path for output files.  Created if it
            doesn't exist.
    """
    os.makedirs(output_dir, exist_ok=True)
    buckets = payload["series"]["buckets"]

    with open(f"{output_dir}/series.json", "w") as f:
        json.dump(buckets, f, indent=2)

    with open(f"{output_dir}/series.csv", "w", newline="") as f:
        writer = csv.DictWriter(
            f,
            fieldnames=["period_key", "period_start", "period_end", "display_label", "total", "count"],
            extrasaction="ignore",
        )
        writer.writeheader()
        writer.writerows(buckets)

    summary = {k: v for k, v in payload.items() if k != "series"}
    with open(f"{output_dir}/summary.json", "w") as f:
        json.dump(summary, f, indent=2)


def _format_amount(value: float) -> str:
    return f"{value:,.2f}" if isinstance(value, float) and not value.is_integer() else f"{value:,.0f}"


def print_summary_report(payload: dict[str, Any], source: str = "records") -> None:
    """Print a human-readable report for one analytics payload.

    Args:
        payload: Output of :func:`build_analytics_payload`.
        source: Name of the tracker view, used in the heading.
    """
    window = payload["window"]
    summary = payload["summary"]
    comparison = payload["comparison"]
    trend = payload["trend"]

    print(f"\n{'=' * 60}")
    print(f"Tracker Summary: {source}")
    print(f"{'=' * 60}")
    print(f"Window: {window['start']} to {window['end']} ({window['length_days']} days, by {payload['granularity']})")
    print(f"Total: {_format_amount(summary['total'])} across {summary['count']:,} records")
    print(f"Daily Average: {summary['daily_average']:,.2f}")
    print(f"Average per {payload['granularity'].capitalize()}: {summary['average_per_bucket']:,.2f}")

    best = summary["best_period"]
    if best:
        print(f"Best Period: {best['display_label']} ({_format_amount(best['total'])})")

    if comparison["comparable"]:
        pct = comparison["delta_percent"]
        pct_text = f"{pct:+.2f}%" if pct is not None else "n/a"
        print(
            f"vs Previous Period: {_format_amount(comparison['previous_total'])} "
            f"({comparison['direction']}, {pct_text})"
        )
    print(f"Trend: {trend['percent_change']:+.2f}% (second half vs first half)")
    print(f"Current Streak: {payload['streak']} days (longest {payload['longest_streak']})")

    if payload["categories"]:
        print("\nTop Categories:")
        for category, value in payload["categories"].items():
            print(f"  {category}: {_format_amount(value)}")

    if payload.get("budget_status"):
        print("\nBudget Alerts:")
        for status in payload["budget_status"]:
            print(
                f"  {status['category']}: {_format_amount(status['spent'])} of "
                f"{_format_amount(status['budget'])} ({status['percentage']:.0f}%)"
            )

    print(f"{'=' * 60}")
