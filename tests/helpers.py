"""Shared test helpers for tracker_trends tests.

Regular functions (not fixtures) that can be imported by any test module.
"""

from __future__ import annotations

from datetime import date, timedelta

from records import Record


def make_records(entries: list[tuple[str, float] | tuple[str, float, str]]) -> list[Record]:
    """Build records from (iso_date, value[, category]) tuples."""
    return [Record(*entry) for entry in entries]


def days_ago(ref: date, n: int) -> str:
    """Return the ISO date *n* days before *ref*."""
    return (ref - timedelta(days=n)).isoformat()


def make_tracker_data(ref: date) -> dict:
    """Build a small tracker export with activity in the days before *ref*.

    Args:
        ref: The day treated as "today".

    Returns:
        A dict matching the tracker export structure.
    """
    return {
        "expenses": [
            {"id": "e1", "date": days_ago(ref, 0), "amount": 12.5, "category": "eating out", "description": "lunch"},
            {"id": "e2", "date": days_ago(ref, 1), "amount": 60, "category": "groceries", "description": "market"},
            {"id": "e3", "date": days_ago(ref, 2), "amount": 25, "category": "transportation", "description": "gas"},
            {"id": "e4", "date": days_ago(ref, 40), "amount": 100, "category": "bills", "description": "internet"},
            {"id": "e5", "date": "not-a-date", "amount": 5, "category": "other", "description": "typo"},
        ],
        "income": [
            {"id": "i1", "date": days_ago(ref, 3), "amount": 2000, "category": "Salary", "description": "pay"},
        ],
        "climbing_sessions": [
            {
                "id": "c1",
                "date": days_ago(ref, 1),
                "location": "gym",
                "duration": 90,
                "routes": [
                    {"id": "r1", "grade": "V6", "completed": True, "attempts": 2},
                    {"id": "r2", "grade": "V7", "completed": False, "attempts": 5},
                    {"id": "r3", "grade": "V6", "completed": True, "attempts": 1},
                ],
                "notes": "",
            },
        ],
        "journal_entries": [
            {"id": "j1", "date": days_ago(ref, 0), "title": "t", "content": "c", "mood": "good", "tags": []},
            {"id": "j2", "date": days_ago(ref, 1), "title": "t", "content": "c", "mood": "great", "tags": [],
             "climbed": True, "sends": {"V8": 1, "V9": 0}},
        ],
        "settings": {"darkMode": False, "budgets": {"groceries": 70, "bills": 500}},
    }
