"""Discovery module - package layout lookup."""

from .manifest import (
    DataStreamManifest,
    PackageManifest,
    find_data_stream_root,
    find_package_root,
    read_data_stream_manifest,
    read_package_manifest,
)
from .folders import find_test_folders

__all__ = [
    "DataStreamManifest",
    "PackageManifest",
    "find_data_stream_root",
    "find_package_root",
    "find_test_folders",
    "read_data_stream_manifest",
    "read_package_manifest",
]
