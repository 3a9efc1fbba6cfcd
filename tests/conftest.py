"""Shared fixtures for tracker_trends tests."""

from __future__ import annotations

import json
from datetime import date
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from helpers import make_tracker_data


@pytest.fixture()
def ref_date() -> date:
    """A fixed "today" for tests that don't go through the service."""
    return date(2024, 3, 10)


@pytest.fixture()
def tracker_data() -> dict:
    """Tracker export with activity relative to the real current date."""
    return make_tracker_data(date.today())


@pytest.fixture()
def data_file(tmp_path, tracker_data):
    """Write the tracker export to a temp file and return its path."""
    path = tmp_path / "tracker_data.json"
    path.write_text(json.dumps(tracker_data), encoding="utf-8")
    return path


@pytest.fixture()
def client(data_file):
    """TestClient for app.py reading the temp export.

    Points DATA_PATH at the temp file and resets the module-level cache
    between tests.
    """
    import app as app_module

    fresh_cache = {"data": None, "version": None, "loaded_at": 0.0, "payloads": {}}
    with patch.object(app_module, "_cache", fresh_cache):
        with patch.object(app_module, "DATA_PATH", data_file):
            with TestClient(app_module.app) as tc:
                yield tc
