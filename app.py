"""FastAPI service for tracker trend analytics.

Serves JSON analytics for each tracker view (expenses, income, climbing,
journal) over a requested window.  The export file is cached and
reloaded when it changes on disk or the TTL expires; computed payloads
are memoized per (file version, day, source, window, top_n).

Deployment: uvicorn app:app --host 127.0.0.1 --port 8204
"""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from datetime import date, datetime
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query

from analytics import DEFAULT_TOP_N, build_analytics_payload
from calendar_math import WINDOW_KEYS, AnalyticsError, InvalidWindow, Window, explicit_window
from records import (
    RECORD_KEYS,
    SOURCES,
    budgets_for_source,
    load_tracker_data,
    records_for_source,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
DATA_PATH = Path(
    os.environ.get("TRACKER_DATA_PATH", Path(__file__).parent / "tracker_data.json")
)
CACHE_TTL_SECONDS = 3600  # 1 hour
MAX_CACHED_PAYLOADS = 128

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Tracker Trends",
    root_path="/tracker_trends",
)

# ---------------------------------------------------------------------------
# Thread-safe cache
# ---------------------------------------------------------------------------
_cache_lock = threading.Lock()
_cache: dict[str, Any] = {
    "data": None,
    "version": None,
    "loaded_at": 0.0,
    "payloads": {},
}


def _data_version() -> float:
    try:
        return DATA_PATH.stat().st_mtime
    except FileNotFoundError:
        raise HTTPException(status_code=503, detail="Data file not found")


def _load_data(force_refresh: bool = False) -> tuple[dict[str, Any], float]:
    """Return the tracker export and its version, reloading if stale or forced."""
    version = _data_version()
    now = time.monotonic()
    with _cache_lock:
        if (
            not force_refresh
            and _cache["data"] is not None
            and _cache["version"] == version
            and (now - _cache["loaded_at"]) < CACHE_TTL_SECONDS
        ):
            return _cache["data"], version

    try:
        data = load_tracker_data(str(DATA_PATH))
    except FileNotFoundError:
        raise HTTPException(status_code=503, detail="Data file not found")
    except json.JSONDecodeError:
        raise HTTPException(status_code=500, detail=f"Invalid JSON in {DATA_PATH.name}")
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    logger.info("Loaded tracker data from %s", DATA_PATH)
    with _cache_lock:
        _cache["data"] = data
        _cache["version"] = version
        _cache["loaded_at"] = time.monotonic()
        _cache["payloads"] = {}

    return data, version


def _get_payload(source: str, window: Window | str, top_n: int) -> dict[str, Any]:
    """Return the analytics payload for one request, computing it at most once."""
    data, version = _load_data()
    ref = date.today()
    key = (version, ref, source, window, top_n)
    with _cache_lock:
        cached = _cache["payloads"].get(key)
    if cached is not None:
        logger.debug("Payload cache hit for %s", key)
        return cached

    try:
        records = records_for_source(data, source)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    try:
        payload = build_analytics_payload(
            records,
            window,
            top_n=top_n,
            reference_date=ref,
            budgets=budgets_for_source(data, source),
        )
    except AnalyticsError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    payload = {
        "generated_at": datetime.now().isoformat(),
        "source": source,
        **payload,
    }
    with _cache_lock:
        _store_payload(key, payload)
    return payload


def _store_payload(key: tuple, payload: dict[str, Any]) -> None:
    """Memoize *payload*, evicting entries from other days and the oldest over the cap.

    Caller must hold ``_cache_lock``.
    """
    payloads = _cache["payloads"]
    ref = key[1]
    for stale in [k for k in payloads if k[1] != ref]:
        del payloads[stale]
    while payloads and len(payloads) >= MAX_CACHED_PAYLOADS:
        del payloads[next(iter(payloads))]
    payloads[key] = payload


def _parse_window(window: str, start: str | None, end: str | None) -> Window | str:
    if start is None and end is None:
        return window
    if start is None or end is None:
        raise HTTPException(status_code=400, detail="Both start and end are required")
    try:
        return explicit_window(start, end)
    except InvalidWindow as exc:
        raise HTTPException(status_code=400, detail=str(exc))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get("/health")
@app.get("/healthz")
def healthz():
    return {"status": "ok"}


@app.get("/api/sources")
def api_sources():
    """List the tracker views and symbolic windows the API accepts."""
    return {"sources": list(SOURCES), "windows": list(WINDOW_KEYS)}


@app.get("/api/analytics/{source}")
def api_analytics(
    source: str,
    window: str = "month",
    start: str | None = None,
    end: str | None = None,
    top_n: int = Query(DEFAULT_TOP_N, ge=0),
):
    """Return series, comparison, trend, streak and categories for *source*.

    Either a symbolic ``window`` or an explicit ``start``/``end`` pair
    (ISO dates, inclusive) selects the range.
    """
    return _get_payload(source, _parse_window(window, start, end), top_n)


@app.get("/api/refresh")
def api_refresh():
    """Force a reload of the export file and drop memoized payloads."""
    data, _ = _load_data(force_refresh=True)
    return {
        "status": "refreshed",
        "loaded_at": datetime.now().isoformat(),
        "record_counts": {key: len(data[key]) for key in RECORD_KEYS},
    }
