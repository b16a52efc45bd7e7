"""
Tests for the human and JSON report formats and report output.
"""

from __future__ import annotations

import io
import json

import pytest

from ingest_test.reporting import (
    FORMAT_HUMAN,
    FORMAT_JSON,
    OUTPUT_FILE,
    OUTPUT_STDOUT,
    report_human,
    report_json,
    write_report,
)
from ingest_test.runner.result import TestResult


@pytest.fixture
def results():
    return [
        TestResult("pipeline", "nginx", "access", name="ok.json", time_elapsed=0.1),
        TestResult("pipeline", "nginx", "access", name="bad.json",
                   failure_msg="test case failed", failure_details="diff"),
        TestResult("pipeline", "nginx", "error", name="broken.log", error_msg="boom"),
    ]


def test_human_report_lists_every_case(results):
    report = report_human(results)

    for name in ("ok.json", "bad.json", "broken.log"):
        assert name in report
    assert "PASS" in report
    assert "FAIL: test case failed" in report
    assert "ERROR: boom" in report
    assert "1 passed, 1 failed, 1 errors" in report


def test_human_report_is_deterministic(results):
    assert report_human(results) == report_human(results)


def test_human_report_without_results():
    assert report_human([]) == "No test results\n"


def test_json_report(results):
    report = json.loads(report_json(results))

    assert report["status"] == "failed"
    assert report["summary"] == {
        "total": 3,
        "passed": 1,
        "failed": 1,
        "errors": 1,
        "time_elapsed": 0.1,
    }
    assert [r["name"] for r in report["results"]] == ["ok.json", "bad.json", "broken.log"]
    assert report["results"][1]["failure_details"] == "diff"
    assert report["results"][2]["status"] == "error"


def test_json_report_all_passed():
    report = json.loads(report_json([TestResult("pipeline", "p", "d", name="a.json")]))
    assert report["status"] == "passed"


def test_write_report_to_stream():
    stream = io.StringIO()
    assert write_report("report", FORMAT_HUMAN, "pipeline", OUTPUT_STDOUT, stream=stream) is None
    assert stream.getvalue() == "report"


def test_write_report_to_file(tmp_path):
    path = write_report("{}", FORMAT_JSON, "pipeline", OUTPUT_FILE, report_dir=tmp_path / "out")

    assert path.parent == tmp_path / "out"
    assert path.name.startswith("pipeline-")
    assert path.suffix == ".json"
    assert path.read_text() == "{}"


def test_write_report_unknown_output():
    with pytest.raises(ValueError):
        write_report("x", FORMAT_JSON, "pipeline", "printer")
