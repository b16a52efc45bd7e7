"""Test case data models.

A test case is a list of input events fed to an ingest pipeline. It is
loaded either from a JSON file holding the events directly, or from a
raw log file paired with a ``-config.yml`` sidecar that describes how
lines are joined into events.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

EXPECTED_RESULT_SUFFIX = "-expected.json"
CONFIG_SUFFIX = "-config.yml"

EVENTS_EXTENSION = ".json"
RAW_EXTENSION = ".log"
SUPPORTED_EXTENSIONS = {EVENTS_EXTENSION, RAW_EXTENSION}

DEFAULT_ENCODING = "utf-8"


def expected_result_file(test_case_file: str) -> str:
    """Name of the expected result file for a test case file."""
    return f"{test_case_file}{EXPECTED_RESULT_SUFFIX}"


def config_file(test_case_file: str) -> str:
    """Name of the sidecar config file for a test case file."""
    return f"{test_case_file}{CONFIG_SUFFIX}"


def is_reserved_file(file_name: str) -> bool:
    """Whether a file is an expected result or config file rather than a test case."""
    return file_name.endswith(EXPECTED_RESULT_SUFFIX) or file_name.endswith(CONFIG_SUFFIX)


@dataclass
class MultilineConfig:
    """Rules for joining raw lines into one entry."""
    first_line_pattern: str = ""


@dataclass
class CaseConfig:
    """Sidecar configuration for a raw log test case."""
    multiline: Optional[MultilineConfig] = None
    fields: dict[str, Any] = field(default_factory=dict)
    encoding: str = DEFAULT_ENCODING


@dataclass
class TestCase:
    """Input events for one test case."""
    __test__ = False

    name: str
    events: list[dict[str, Any]] = field(default_factory=list)
    config: Optional[CaseConfig] = None

    @property
    def total_events(self) -> int:
        return len(self.events)


@dataclass
class ValidationError:
    """A single config validation problem."""
    path: str
    message: str
    severity: str = "error"  # "error" or "warning"


@dataclass
class ValidationResult:
    """Result of config validation."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    def __str__(self) -> str:
        if self.valid:
            return "Valid"
        return "; ".join(f"{e.path}: {e.message}" for e in self.errors)
