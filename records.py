"""Record type, JSON loading, and per-domain adapters.

Each tracker view (expenses, income, climbing, journal) keeps its own
shape in the export file.  The adapters here map those shapes onto the
single :class:`Record` that the analytics engine understands, so the
engine never needs to know which view the numbers came from.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"

# Arrays of record-shaped dicts in the export file.
RECORD_KEYS = ("expenses", "income", "climbing_sessions", "journal_entries")


@dataclass(frozen=True)
class Record:
    """One dated value.

    ``date`` is kept as supplied (``date``, ``datetime`` or ISO string);
    the engine parses it and skips the record if it cannot.
    """

    date: date | datetime | str
    value: float
    category: str | None = None


def coerce_record(raw: Record | Mapping[str, Any]) -> Record:
    """Normalise a record-shaped value into a :class:`Record`.

    Args:
        raw: Either a ``Record`` (returned unchanged) or a mapping with a
            "date" key, a "value" (or "amount") key and an optional
            "category".

    Returns:
        The corresponding ``Record``.

    Raises:
        TypeError: If *raw* is neither a Record nor a mapping.
        ValueError: If the value is not a finite number.
    """
    if isinstance(raw, Record):
        return raw
    if not isinstance(raw, Mapping):
        raise TypeError(f"Expected a Record or mapping, got {type(raw).__name__}")
    value = raw.get("value", raw.get("amount", 0))
    if isinstance(value, bool):
        raise ValueError(f"Non-numeric record value: {value!r}")
    if not isinstance(value, (int, float)):
        try:
            value = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Non-numeric record value: {value!r}") from exc
    if not math.isfinite(value):
        raise ValueError(f"Non-finite record value: {value!r}")
    category = raw.get("category")
    return Record(
        date=raw.get("date"),
        value=value,
        category=str(category) if category else None,
    )


def coerce_records(raws: Iterable[Record | Mapping[str, Any]]) -> list[Record]:
    """Coerce many records, skipping (and logging) ones with bad values."""
    result: list[Record] = []
    for raw in raws:
        try:
            result.append(coerce_record(raw))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping malformed record %r: %s", raw, exc)
    return result


def _load_budgets(settings: Any, path: str) -> dict[str, float]:
    """Read ``settings.budgets`` as category -> positive finite amount."""
    budgets = settings.get("budgets") if isinstance(settings, dict) else None
    if budgets is None:
        return {}
    if not isinstance(budgets, dict):
        logger.warning("Ignoring settings.budgets in %s: expected an object", path)
        return {}

    result: dict[str, float] = {}
    for category, amount in budgets.items():
        if (
            isinstance(amount, bool)
            or not isinstance(amount, (int, float))
            or not math.isfinite(amount)
            or amount <= 0
        ):
            logger.warning("Ignoring budget %r for %r in %s", amount, category, path)
            continue
        result[str(category)] = amount
    return result


def load_tracker_data(path: str = "tracker_data.json") -> dict[str, Any]:
    """Load a tracker export JSON file.

    Args:
        path: Filesystem path to the export.  The top-level object holds
            arrays under "expenses", "income", "climbing_sessions" and
            "journal_entries"; missing arrays are treated as empty.
            Per-category spending budgets are read from
            ``settings.budgets`` when present.

    Returns:
        Dict with the four record keys, each mapping to a list of dicts,
        plus "budgets" mapping category to budget amount.

    Raises:
        FileNotFoundError: If the file at *path* does not exist.
        json.JSONDecodeError: If the file contains invalid JSON.
        ValueError: If the top level is not a JSON object.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at the top level of {path}")

    result: dict[str, Any] = {}
    for key in RECORD_KEYS:
        items = data.get(key) or []
        if not isinstance(items, list):
            logger.warning("Ignoring %r in %s: expected a list", key, path)
            items = []
        result[key] = [item for item in items if isinstance(item, dict)]
    result["budgets"] = _load_budgets(data.get("settings"), path)
    return result


# ---------------------------------------------------------------------------
# Domain adapters
# ---------------------------------------------------------------------------

def expenses_to_records(expenses: Iterable[dict]) -> list[Record]:
    return coerce_records(
        {"date": e.get("date"), "amount": e.get("amount", 0), "category": e.get("category")}
        for e in expenses
    )


def income_to_records(income: Iterable[dict]) -> list[Record]:
    return expenses_to_records(income)


def climbing_sends_to_records(
    sessions: Iterable[dict],
    journal_entries: Iterable[dict] = (),
) -> list[Record]:
    """Map climbing data onto one send count per grade per day.

    Sessions contribute one record (value 1) per completed route,
    categorised by grade.  Journal entries marked ``climbed`` contribute
    their legacy ``sends`` counts (``{"V6": 2, ...}``) the same way.

    Args:
        sessions: Climbing session dicts with "date" and "routes".
        journal_entries: Journal entry dicts, possibly carrying
            "climbed" and "sends".

    Returns:
        List of records, one per completed route or non-zero grade count.
    """
    raws: list[dict[str, Any]] = []
    for session in sessions:
        routes = session.get("routes") or []
        for route in routes:
            if isinstance(route, dict) and route.get("completed"):
                raws.append({"date": session.get("date"), "value": 1, "category": route.get("grade")})

    for entry in journal_entries:
        sends = entry.get("sends")
        if not entry.get("climbed") or not isinstance(sends, dict):
            continue
        for grade, count in sends.items():
            if isinstance(count, (int, float)) and not isinstance(count, bool) and count > 0:
                raws.append({"date": entry.get("date"), "value": count, "category": grade})
    return coerce_records(raws)


def journal_to_records(entries: Iterable[dict]) -> list[Record]:
    return coerce_records(
        {"date": e.get("date"), "value": 1, "category": e.get("mood")}
        for e in entries
    )


SOURCES: dict[str, Callable[[Mapping[str, Any]], list[Record]]] = {
    "expenses": lambda data: expenses_to_records(data.get("expenses", [])),
    "income": lambda data: income_to_records(data.get("income", [])),
    "climbing": lambda data: climbing_sends_to_records(
        data.get("climbing_sessions", []), data.get("journal_entries", []),
    ),
    "journal": lambda data: journal_to_records(data.get("journal_entries", [])),
}


def records_for_source(data: Mapping[str, Any], source: str) -> list[Record]:
    """Return the records for one tracker view.

    Raises:
        ValueError: If *source* is not one of ``SOURCES``.
    """
    adapter = SOURCES.get(source)
    if adapter is None:
        raise ValueError(
            f"Unknown source {source!r}; expected one of {', '.join(SOURCES)}"
        )
    return adapter(data)


def budgets_for_source(data: Mapping[str, Any], source: str) -> dict[str, float]:
    """Spending budgets that apply to *source*; only expenses have any."""
    if source != "expenses":
        return {}
    return dict(data.get("budgets") or {})
