"""Result model shared by runners and reporters."""

from dataclasses import dataclass
from typing import Any


@dataclass
class TestResult:
    """Outcome of a single test case.

    ``error_msg`` is set when the test case could not be evaluated,
    ``failure_msg`` (and optionally ``failure_details``) when it was
    evaluated but the observed output did not match the expectation.
    """
    __test__ = False

    test_type: str
    package: str
    data_stream: str
    name: str = ""
    time_elapsed: float = 0.0  # seconds
    error_msg: str = ""
    failure_msg: str = ""
    failure_details: str = ""

    @property
    def errored(self) -> bool:
        return bool(self.error_msg)

    @property
    def failed(self) -> bool:
        return bool(self.failure_msg)

    @property
    def passed(self) -> bool:
        return not self.errored and not self.failed

    @property
    def status(self) -> str:
        if self.errored:
            return "error"
        if self.failed:
            return "fail"
        return "pass"


@dataclass(frozen=True)
class TestFolder:
    """A folder of test cases belonging to one data stream."""
    __test__ = False

    path: str
    package: str
    data_stream: str


@dataclass(frozen=True)
class TestOptions:
    """Options for one runner invocation."""
    __test__ = False

    test_folder: TestFolder
    es_client: Any
    generate_test_result: bool = False
