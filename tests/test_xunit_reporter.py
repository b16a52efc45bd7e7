"""
Tests for the xUnit report format.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from ingest_test.errors import ReportFormatError
from ingest_test.reporting import default_reporter_registry
from ingest_test.reporting.xunit_reporter import FORMAT_XUNIT, XML_HEADER, report_xunit
from ingest_test.runner.result import TestResult


def _result(name, package="pkg", data_stream="ds", test_type="pipeline", **kwargs):
    return TestResult(test_type=test_type, package=package, data_stream=data_stream, name=name, **kwargs)


def _parse(report: str) -> ET.Element:
    assert report.startswith(XML_HEADER)
    return ET.fromstring(report[len(XML_HEADER):])


def test_mismatch_scenario_report():
    results = [
        _result("case1.json", time_elapsed=0.25),
        _result("case2.json", failure_msg="test case failed", failure_details="diff"),
    ]

    root = _parse(report_xunit(results))

    assert root.tag == "testsuites"
    type_suite = root.find("testsuite")
    assert type_suite.get("name") == "pipeline"
    assert type_suite.get("tests") == "2"
    assert type_suite.get("failures") == "1"
    assert type_suite.get("errors") is None  # zero counts are omitted

    ds_suite = root.find("./testsuite[@name='pipeline']/testsuite[@name='pkg']/testsuite[@name='ds']")
    cases = ds_suite.findall("testcase")
    assert [c.get("name") for c in cases] == ["case1.json", "case2.json"]
    assert cases[0].get("time") == "0.250"
    assert cases[0].find("failure") is None
    assert cases[1].find("failure").text == "test case failed: diff"


def test_error_element():
    root = _parse(report_xunit([_result("case3.csv", error_msg="loading test case failed")]))

    case = root.find(".//testcase")
    assert case.find("error").text == "loading test case failed"
    assert root.find("testsuite").get("errors") == "1"


def test_suite_comments():
    report = report_xunit([_result("a.json")])

    assert "<!--test suite for pipeline tests-->" in report
    assert "<!--test suite for package: pkg-->" in report
    assert "<!--test suite for data stream: ds-->" in report


def test_counts_are_global_on_every_test_type_suite():
    results = [
        _result("a.json", test_type="pipeline", failure_msg="test case failed"),
        _result("b.json", test_type="system", error_msg="boom"),
        _result("c.json", test_type="system"),
    ]

    root = _parse(report_xunit(results))

    for suite in root.findall("testsuite"):
        assert suite.get("tests") == "3"
        assert suite.get("failures") == "1"
        assert suite.get("errors") == "1"


def test_grouping_preserves_case_order_within_data_stream():
    results = [
        _result("z.json", package="b", data_stream="y"),
        _result("b.json", package="a", data_stream="x"),
        _result("a.json", package="b", data_stream="y"),
        _result("m.json", package="a", data_stream="w"),
    ]

    root = _parse(report_xunit(results))

    by_ds = {
        (pkg.get("name"), ds.get("name")): [c.get("name") for c in ds.findall("testcase")]
        for pkg in root.find("testsuite").findall("testsuite")
        for ds in pkg.findall("testsuite")
    }
    assert by_ds == {
        ("a", "w"): ["m.json"],
        ("a", "x"): ["b.json"],
        ("b", "y"): ["z.json", "a.json"],
    }


def test_rendering_is_deterministic():
    results = [
        _result("z.json", package="b"),
        _result("a.json", package="a", failure_msg="test case failed"),
        _result("q.json", test_type="other"),
    ]

    assert report_xunit(results) == report_xunit(list(results))


def test_control_characters_are_replaced():
    results = [
        _result("case\x0c.json", error_msg="open failed: \x00bad"),
        _result("b.json", failure_msg="test case failed", failure_details="\x1b[31mERR\x1b[0m"),
    ]

    root = _parse(report_xunit(results))

    cases = root.findall(".//testcase")
    assert cases[0].get("name") == "case\ufffd.json"
    assert cases[0].find("error").text == "open failed: \ufffdbad"
    assert cases[1].find("failure").text == "test case failed: \ufffd[31mERR\ufffd[0m"


def test_names_that_break_comments():
    report = report_xunit([_result("a.json", package="my--pkg", data_stream="logs-")])

    root = _parse(report)
    pkg_suite = root.find("testsuite/testsuite")
    assert pkg_suite.get("name") == "my--pkg"
    assert pkg_suite.find("testsuite").get("name") == "logs-"


def test_empty_results():
    root = _parse(report_xunit([]))
    assert list(root) == []


def test_serialization_error_is_wrapped(monkeypatch):
    def broken(*args, **kwargs):
        raise TypeError("cannot serialize")

    monkeypatch.setattr(ET, "tostring", broken)

    with pytest.raises(ReportFormatError, match="unable to format test results as xUnit"):
        report_xunit([_result("a.json")])


def test_registered_in_default_registry():
    registry = default_reporter_registry()
    report = registry.report(FORMAT_XUNIT, [_result("a.json")])
    assert report.startswith(XML_HEADER)
