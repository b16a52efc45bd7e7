"""Cases module - pipeline test case files."""

from .schema import (
    CONFIG_SUFFIX,
    EXPECTED_RESULT_SUFFIX,
    CaseConfig,
    MultilineConfig,
    TestCase,
    ValidationError,
    ValidationResult,
    config_file,
    expected_result_file,
    is_reserved_file,
)
from .parser import (
    load_case_config,
    load_test_case_file,
    parse_case_config_data,
    parse_events_test_case,
    parse_raw_test_case,
    read_raw_entries,
)
from .validator import validate_case_config

__all__ = [
    "CONFIG_SUFFIX",
    "EXPECTED_RESULT_SUFFIX",
    "CaseConfig",
    "MultilineConfig",
    "TestCase",
    "ValidationError",
    "ValidationResult",
    "config_file",
    "expected_result_file",
    "is_reserved_file",
    "load_case_config",
    "load_test_case_file",
    "parse_case_config_data",
    "parse_events_test_case",
    "parse_raw_test_case",
    "read_raw_entries",
    "validate_case_config",
]
