"""Expected result ("golden") files for pipeline tests.

The expected result of ``foo.log`` lives next to it in
``foo.log-expected.json`` as ``{"expected": [<event>, ...]}``.
"""

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Union

from deepdiff import DeepDiff

from ...cases.schema import expected_result_file
from ...errors import GoldenFileError, TestCaseMismatch

logger = logging.getLogger(__name__)

# Fields whose values change on every run.
DYNAMIC_FIELDS = (("event", "ingested"),)


def expected_result_path(test_case_path: Union[str, Path]) -> Path:
    test_case_path = Path(test_case_path)
    return test_case_path.with_name(expected_result_file(test_case_path.name))


def strip_dynamic_fields(events: list[Any]) -> list[Any]:
    """Return a copy of ``events`` without fields that vary between runs."""
    stripped = copy.deepcopy(events)
    for event in stripped:
        if not isinstance(event, dict):
            continue
        for *parents, leaf in DYNAMIC_FIELDS:
            node = event
            for key in parents:
                node = node.get(key) if isinstance(node, dict) else None
            if isinstance(node, dict):
                node.pop(leaf, None)
    return stripped


def write_expected_result(test_case_path: Union[str, Path], events: list[Any]) -> Path:
    """Overwrite the expected result file of a test case.

    Raises:
        GoldenFileError: If the file cannot be written.
    """
    path = expected_result_path(test_case_path)
    document = {"expected": strip_dynamic_fields(events)}
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=4, sort_keys=True, ensure_ascii=False)
            f.write("\n")
    except (OSError, TypeError, ValueError) as e:
        raise GoldenFileError(f"writing test result failed (path: {path}): {e}") from e
    logger.debug("Wrote expected result %s", path)
    return path


def read_expected_result(test_case_path: Union[str, Path]) -> list[Any]:
    """Read the expected events of a test case.

    Raises:
        GoldenFileError: If the file is missing, unreadable or malformed.
    """
    path = expected_result_path(test_case_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise GoldenFileError(f"reading expected test result failed (path: {path}): {e}") from e
    except ValueError as e:
        raise GoldenFileError(f"unmarshalling expected test result failed (path: {path}): {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("expected"), list):
        raise GoldenFileError(f"expected test result must hold an 'expected' list (path: {path})")
    return document["expected"]


def compare_results(expected: list[Any], actual: list[Any]) -> None:
    """Compare expected and observed events.

    Raises:
        TestCaseMismatch: If the events differ. ``details`` holds a readable diff.
    """
    diff = DeepDiff(strip_dynamic_fields(expected), strip_dynamic_fields(actual))
    if not diff:
        return
    raise TestCaseMismatch("test case failed", details=format_diff(diff))


def format_diff(diff: DeepDiff) -> str:
    """Format DeepDiff output into a readable message."""
    lines = ["Expected results are different from actual ones:"]

    for path in sorted(_clean_path(str(p)) for p in diff.get("dictionary_item_removed", [])):
        lines.append(f"  - {path}: missing field")
    for path in sorted(_clean_path(str(p)) for p in diff.get("dictionary_item_added", [])):
        lines.append(f"  + {path}: unexpected field")

    for path, change in diff.get("values_changed", {}).items():
        lines.append(
            f"  ~ {_clean_path(path)}: expected {_dump(change.get('old_value'))}, "
            f"found {_dump(change.get('new_value'))}"
        )

    for path, change in diff.get("type_changes", {}).items():
        old_type = change.get("old_type", type(None)).__name__
        new_type = change.get("new_type", type(None)).__name__
        lines.append(
            f"  ~ {_clean_path(path)}: expected {old_type} {_dump(change.get('old_value'))}, "
            f"found {new_type} {_dump(change.get('new_value'))}"
        )

    for path, value in diff.get("iterable_item_removed", {}).items():
        lines.append(f"  - {_clean_path(path)}: missing {_dump(value)}")
    for path, value in diff.get("iterable_item_added", {}).items():
        lines.append(f"  + {_clean_path(path)}: unexpected {_dump(value)}")

    return "\n".join(lines)


def _clean_path(path: str) -> str:
    """root[0]['event']['kind'] -> [0].event.kind"""
    cleaned = re.sub(r"\['([^']*)'\]", r".\1", path.replace("root", "", 1))
    return cleaned.lstrip(".") or "<root>"


def _dump(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)
