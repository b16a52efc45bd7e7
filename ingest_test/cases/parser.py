"""Test case file parser.

Turns ``.json`` and ``.log`` test case files into TestCase objects.
"""

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..errors import TestCaseLoadError
from .schema import (
    DEFAULT_ENCODING,
    EVENTS_EXTENSION,
    SUPPORTED_EXTENSIONS,
    CaseConfig,
    MultilineConfig,
    TestCase,
    config_file,
)
from .validator import validate_case_config

logger = logging.getLogger(__name__)


def load_test_case_file(file_path: Union[str, Path]) -> TestCase:
    """Load a test case file.

    Args:
        file_path: Path to a ``.json`` or ``.log`` test case file.

    Returns:
        Parsed TestCase named after the file.

    Raises:
        TestCaseLoadError: If the file has an unsupported extension, cannot
            be read, or its content (or sidecar config) is invalid.
    """
    file_path = Path(file_path)
    ext = file_path.suffix

    if ext not in SUPPORTED_EXTENSIONS:
        raise TestCaseLoadError(f"unsupported extension for test case file (ext: {ext})")

    try:
        data = file_path.read_bytes()
    except OSError as e:
        raise TestCaseLoadError(f"reading input file failed (testCasePath: {file_path}): {e}") from e

    if ext == EVENTS_EXTENSION:
        return parse_events_test_case(file_path.name, data, source=str(file_path))

    config = load_case_config(file_path)
    return parse_raw_test_case(file_path.name, data, config, source=str(file_path))


def parse_events_test_case(name: str, data: bytes, source: str = "<inline>") -> TestCase:
    """Parse a JSON test case of the form ``{"events": [...]}``."""
    try:
        definition = json.loads(data)
    except ValueError as e:
        raise TestCaseLoadError(f"unmarshalling input data failed ({source}): {e}") from e

    if not isinstance(definition, dict):
        raise TestCaseLoadError(f"test case must be a JSON object, got {type(definition).__name__} ({source})")

    events = definition.get("events")
    if not isinstance(events, list):
        raise TestCaseLoadError(f"'events' must be a list ({source})")

    for i, event in enumerate(events):
        if not isinstance(event, dict):
            raise TestCaseLoadError(f"events[{i}] must be an object ({source})")

    return TestCase(name=name, events=events)


def parse_raw_test_case(
    name: str,
    data: bytes,
    config: CaseConfig,
    source: str = "<inline>",
) -> TestCase:
    """Parse raw log lines into ``{"message": ...}`` events."""
    try:
        text = data.decode(config.encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise TestCaseLoadError(f"decoding input data as {config.encoding} failed ({source}): {e}") from e

    events = []
    for entry in read_raw_entries(text, config):
        event: dict[str, Any] = {"message": entry}
        event.update(copy.deepcopy(config.fields))
        events.append(event)

    return TestCase(name=name, events=events, config=config)


def read_raw_entries(text: str, config: CaseConfig) -> list[str]:
    """Split raw input into entries, joining multiline entries."""
    if config.multiline is None or not config.multiline.first_line_pattern:
        return text.splitlines()

    first_line = re.compile(config.multiline.first_line_pattern)
    entries: list[str] = []
    current: list[str] = []

    for line in text.splitlines():
        if first_line.search(line) and current:
            entries.append("\n".join(current))
            current = []
        current.append(line)

    if current:
        entries.append("\n".join(current))
    return entries


def load_case_config(test_case_path: Union[str, Path]) -> CaseConfig:
    """Read the ``-config.yml`` sidecar of a raw test case.

    Raises:
        TestCaseLoadError: If the sidecar is missing, malformed or invalid.
    """
    test_case_path = Path(test_case_path)
    config_path = test_case_path.with_name(config_file(test_case_path.name))

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise TestCaseLoadError(f"reading config for test case failed (testCasePath: {test_case_path}): {e}") from e
    except yaml.YAMLError as e:
        raise TestCaseLoadError(f"parsing config for test case failed ({config_path}): {e}") from e

    config = parse_case_config_data(data, source=str(config_path))

    validation = validate_case_config(config)
    for warning in validation.warnings:
        logger.warning("%s: %s (%s)", warning.path, warning.message, config_path)
    if not validation.valid:
        raise TestCaseLoadError(f"invalid config for test case ({config_path}): {validation}")

    return config


def parse_case_config_data(data: Optional[Any], source: str = "<inline>") -> CaseConfig:
    """Parse a config mapping (already loaded YAML) into a CaseConfig."""
    if data is None:
        return CaseConfig()
    if not isinstance(data, dict):
        raise TestCaseLoadError(f"config must be a YAML mapping, got {type(data).__name__} ({source})")

    multiline = None
    multiline_data = data.get("multiline")
    if multiline_data is not None:
        if not isinstance(multiline_data, dict):
            raise TestCaseLoadError(f"'multiline' must be a mapping ({source})")
        multiline = MultilineConfig(
            first_line_pattern=str(multiline_data.get("first_line_pattern") or ""),
        )

    fields = data.get("fields") or {}
    if not isinstance(fields, dict):
        raise TestCaseLoadError(f"'fields' must be a mapping ({source})")

    encoding = data.get("encoding") or DEFAULT_ENCODING

    return CaseConfig(multiline=multiline, fields=fields, encoding=str(encoding))
