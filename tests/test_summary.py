"""Tests for tracker_summary.py::main()."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from tracker_summary import main


MODULE = "tracker_summary"


class TestMainErrorHandling:
    """Verify main() exits with code 1 on unreadable input or a bad window."""

    def test_missing_file_exits_1(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "nonexistent.json")])
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_json_exits_1(self):
        err = json.JSONDecodeError("bad value", "", 0)
        with patch(f"{MODULE}.load_tracker_data", side_effect=err):
            with pytest.raises(SystemExit) as exc_info:
                main(["corrupt.json"])
            assert exc_info.value.code == 1

    def test_top_level_not_object_exits_1(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])
        assert exc_info.value.code == 1

    def test_bad_explicit_window_exits_1(self, data_file, tmp_path):
        argv = [str(data_file), "--start", "2024-02-01", "--end", "2024-01-01",
                "-o", str(tmp_path / "out")]
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 1

    def test_empty_start_is_not_ignored(self, data_file, tmp_path, capsys):
        argv = [str(data_file), "--start", "", "--end", "2024-01-31", "-o", str(tmp_path / "out")]
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 1
        assert "Unparseable" in capsys.readouterr().err
        assert not (tmp_path / "out").exists()

    def test_negative_top_n_exits_1(self, data_file, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(data_file), "--top-n", "-1", "-o", str(tmp_path / "out")])
        assert exc_info.value.code == 1


class TestArgumentValidation:
    def test_start_without_end_is_usage_error(self, data_file):
        with pytest.raises(SystemExit) as exc_info:
            main([str(data_file), "--start", "2024-01-01"])
        assert exc_info.value.code == 2

    def test_unknown_source_is_usage_error(self, data_file):
        with pytest.raises(SystemExit) as exc_info:
            main([str(data_file), "--source", "sleep"])
        assert exc_info.value.code == 2


class TestMainSuccessfulRun:
    def test_writes_files_and_prints_report(self, data_file, tmp_path, capsys):
        out = tmp_path / "out"
        main([str(data_file), "--window", "week", "-o", str(out)])

        output = capsys.readouterr().out
        assert "Tracker Summary: expenses" in output
        assert "Total: 97.50" in output
        assert f"saved to the '{out}' directory" in output

        assert (out / "series.csv").exists()
        assert "Budget Alerts:" in output
        assert "groceries: 60 of 70 (86%)" in output
        summary = json.loads((out / "summary.json").read_text())
        assert summary["streak"] == 3
        assert summary["budget_status"][0]["category"] == "groceries"
        assert summary["summary"]["total"] == 97.5

    def test_explicit_range_and_source(self, data_file, tmp_path, capsys):
        out = tmp_path / "out"
        main([str(data_file), "-s", "climbing", "--start", "2020-01-01",
              "--end", "2020-01-31", "-o", str(out)])
        assert "Tracker Summary: climbing" in capsys.readouterr().out
        series = json.loads((out / "series.json").read_text())
        assert len(series) == 31

    def test_calls_pipeline_in_order(self, tmp_path):
        with (
            patch(f"{MODULE}.load_tracker_data", return_value={"expenses": [], "budgets": {"food": 50}}),
            patch(f"{MODULE}.build_analytics_payload", return_value={}) as mock_build,
            patch(f"{MODULE}.save_analytics_files") as mock_save,
            patch(f"{MODULE}.print_summary_report") as mock_print,
        ):
            main(["data.json", "-w", "year", "-n", "3", "-o", str(tmp_path)])
        mock_build.assert_called_once_with([], "year", top_n=3, budgets={"food": 50})
        mock_save.assert_called_once_with({}, str(tmp_path))
        mock_print.assert_called_once_with({}, "expenses")
