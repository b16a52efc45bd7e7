"""Report output destinations."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO, Union

OUTPUT_STDOUT = "stdout"
OUTPUT_FILE = "file"
REPORT_OUTPUTS = (OUTPUT_STDOUT, OUTPUT_FILE)

DEFAULT_REPORT_DIR = Path("build") / "test-results"

FILE_EXTENSIONS = {
    "xUnit": "xml",
    "human": "txt",
    "json": "json",
}


def write_report(
    report: str,
    report_format: str,
    test_type: str,
    output: str = OUTPUT_STDOUT,
    report_dir: Optional[Union[str, Path]] = None,
    stream: Optional[TextIO] = None,
) -> Optional[Path]:
    """Write a formatted report.

    Args:
        report: Formatted report text.
        report_format: Format tag, selects the file extension.
        test_type: Test type, used in the file name.
        output: "stdout" or "file".
        report_dir: Directory for file output.
        stream: Stream for stdout output (default: sys.stdout).

    Returns:
        Path of the written file, or None for stdout output.

    Raises:
        ValueError: If ``output`` is unknown.
        OSError: If the report file cannot be written.
    """
    if output == OUTPUT_STDOUT:
        (stream or sys.stdout).write(report)
        return None

    if output != OUTPUT_FILE:
        raise ValueError(f"unsupported report output: {output}")

    directory = Path(report_dir) if report_dir else DEFAULT_REPORT_DIR
    directory.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
    extension = FILE_EXTENSIONS.get(report_format, "txt")
    path = directory / f"{test_type}-{timestamp}.{extension}"

    with open(path, "w", encoding="utf-8") as f:
        f.write(report)

    return path
