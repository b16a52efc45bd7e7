"""
Tests for the error kinds callers branch on.
"""

import pytest

from ingest_test.errors import (
    ElasticsearchConnectionError,
    ElasticsearchError,
    ErrorKind,
    GoldenFileError,
    TestCaseLoadError,
    TestCaseMismatch,
    TestCasesFailed,
    TestRunError,
)


@pytest.mark.parametrize("error", [
    TestCaseMismatch(details="diff"),
    TestCasesFailed([], 1),
])
def test_mismatch_kind(error):
    assert error.kind is ErrorKind.MISMATCH
    assert error.is_mismatch


@pytest.mark.parametrize("error", [
    ElasticsearchError("status 500", 500),
    ElasticsearchConnectionError("refused"),
    GoldenFileError("missing"),
    TestCaseLoadError("bad extension"),
    TestRunError("aborted"),
])
def test_infrastructure_kind(error):
    assert error.kind is ErrorKind.INFRASTRUCTURE
    assert not error.is_mismatch


def test_cases_failed_carries_results_and_count():
    err = TestCasesFailed(["a", "b", "c"], 2)

    assert isinstance(err, TestRunError)
    assert err.results == ["a", "b", "c"]
    assert err.failed_count == 2
    assert str(err) == "at least one test case failed (2 of 3)"
