"""Discovery of test folders inside a package."""

from pathlib import Path
from typing import Iterable, Optional, Union

from ..runner.result import TestFolder
from .manifest import MANIFEST_FILE, read_package_manifest

DATA_STREAM_DIR = "data_stream"


def find_test_folders(
    package_root: Union[str, Path],
    test_type: str,
    data_streams: Optional[Iterable[str]] = None,
) -> list[TestFolder]:
    """Find test folders of a given type, ordered by data stream name.

    Test folders live at ``data_stream/<name>/_dev/test/<test_type>``.

    Args:
        package_root: Package root directory.
        test_type: Test type tag, used as the folder name.
        data_streams: Only include these data streams. None = all.

    Returns:
        Matching test folders.
    """
    package_root = Path(package_root)
    package_name = read_package_manifest(package_root / MANIFEST_FILE).name or package_root.name
    wanted = set(data_streams) if data_streams else None

    data_stream_dir = package_root / DATA_STREAM_DIR
    if not data_stream_dir.is_dir():
        return []

    folders = []
    for ds_path in sorted(data_stream_dir.iterdir()):
        if not ds_path.is_dir():
            continue
        if wanted is not None and ds_path.name not in wanted:
            continue
        test_path = ds_path / "_dev" / "test" / test_type
        if test_path.is_dir():
            folders.append(TestFolder(
                path=str(test_path),
                package=package_name,
                data_stream=ds_path.name,
            ))
    return folders
