"""xUnit report format.

Results are grouped into nested suites: test type -> package -> data
stream -> test cases. Group keys are emitted in lexical order so the same
results always produce the same document. Cases keep their execution order.

The ``tests``/``failures``/``errors`` counts on every test type suite are
computed over all results of the run, not just that suite's.
"""

import re
import xml.etree.ElementTree as ET
from typing import Sequence

from ..errors import ReportFormatError
from ..runner.result import TestResult

FORMAT_XUNIT = "xUnit"

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Anything outside the XML 1.0 Char production.
_INVALID_XML_CHARS = re.compile(r"[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def report_xunit(results: Sequence[TestResult]) -> str:
    """Format results as an xUnit XML document.

    Raises:
        ReportFormatError: If the document cannot be serialized.
    """
    # test type => package => data stream => results
    tests: dict[str, dict[str, dict[str, list[TestResult]]]] = {}

    num_tests = num_failures = num_errors = 0
    for r in results:
        tests.setdefault(r.test_type, {}).setdefault(r.package, {}).setdefault(r.data_stream, []).append(r)
        num_tests += 1
        if r.failure_msg:
            num_failures += 1
        if r.error_msg:
            num_errors += 1

    root = ET.Element("testsuites")
    for test_type in sorted(tests):
        type_suite = _add_suite(
            root,
            test_type,
            f"test suite for {test_type} tests",
            tests=num_tests,
            failures=num_failures,
            errors=num_errors,
        )
        packages = tests[test_type]

        for package in sorted(packages):
            package_suite = _add_suite(type_suite, package, f"test suite for package: {package}")
            data_streams = packages[package]

            for data_stream in sorted(data_streams):
                ds_suite = _add_suite(package_suite, data_stream, f"test suite for data stream: {data_stream}")
                for r in data_streams[data_stream]:
                    _add_case(ds_suite, r)

    try:
        ET.indent(root, space="  ")
        out = ET.tostring(root, encoding="unicode")
    except (TypeError, ValueError) as e:
        raise ReportFormatError(f"unable to format test results as xUnit: {e}") from e

    return XML_HEADER + out


def _add_suite(parent: ET.Element, name: str, comment: str, **counts: int) -> ET.Element:
    suite = ET.SubElement(parent, "testsuite", name=_clean(name))
    for key, value in counts.items():
        # zero counts are omitted
        if value:
            suite.set(key, str(value))
    suite.append(ET.Comment(_comment_text(comment)))
    return suite


def _add_case(parent: ET.Element, result: TestResult) -> None:
    case = ET.SubElement(
        parent,
        "testcase",
        name=_clean(result.name),
        time=f"{result.time_elapsed:.3f}",
    )

    failure = result.failure_msg
    if result.failure_details:
        failure += ": " + result.failure_details

    if result.error_msg:
        ET.SubElement(case, "error").text = _clean(result.error_msg)
    if failure:
        ET.SubElement(case, "failure").text = _clean(failure)


def _clean(text: str) -> str:
    """Replace characters XML cannot represent with U+FFFD."""
    return _INVALID_XML_CHARS.sub("\ufffd", text)


def _comment_text(text: str) -> str:
    # "--" may not appear inside a comment, nor "-" right before its end
    text = re.sub(r"-(?=-)", "- ", _clean(text))
    if text.endswith("-"):
        text += " "
    return text
