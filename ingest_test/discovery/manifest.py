"""Package and data stream manifests.

Locates the package root and the data stream root owning a path by
walking up the directory tree and inspecting ``manifest.yml`` files.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import yaml

from ..errors import ManifestError

MANIFEST_FILE = "manifest.yml"
DEFAULT_INGEST_PIPELINE = "default"
DATA_STREAM_TYPES = {"logs", "metrics"}
PACKAGE_TYPE_INTEGRATION = "integration"


@dataclass
class PackageManifest:
    """Subset of a package manifest."""
    name: str = ""
    title: str = ""
    version: str = ""
    type: str = ""

    @property
    def is_integration(self) -> bool:
        return self.type == PACKAGE_TYPE_INTEGRATION and bool(self.version)


@dataclass
class DataStreamManifest:
    """Subset of a data stream manifest."""
    title: str = ""
    type: str = ""
    ingest_pipeline: str = ""

    @property
    def is_data_stream(self) -> bool:
        return bool(self.title) and self.type in DATA_STREAM_TYPES

    @property
    def pipeline_name(self) -> str:
        """Entry pipeline name, falling back to the default pipeline."""
        return self.ingest_pipeline or DEFAULT_INGEST_PIPELINE


def read_manifest(path: Union[str, Path]) -> dict:
    """Load a manifest file as a mapping.

    Raises:
        ManifestError: If the file is unreadable, malformed, or not a mapping.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ManifestError(f"reading manifest file failed (path: {path}): {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ManifestError(f"manifest must be a YAML mapping (path: {path})")
    return data


def read_package_manifest(path: Union[str, Path]) -> PackageManifest:
    data = read_manifest(path)
    return PackageManifest(**{
        k: str(v) for k, v in data.items()
        if k in PackageManifest.__dataclass_fields__ and v is not None
    })


def read_data_stream_manifest(path: Union[str, Path]) -> DataStreamManifest:
    data = read_manifest(path)
    return DataStreamManifest(**{
        k: str(v) for k, v in data.items()
        if k in DataStreamManifest.__dataclass_fields__ and v is not None
    })


def find_package_root(path: Union[str, Path]) -> Optional[str]:
    """Return the closest ancestor of ``path`` holding a package manifest."""
    return _find_root(path, lambda p: read_package_manifest(p).is_integration)


def find_data_stream_root(path: Union[str, Path]) -> Optional[str]:
    """Return the closest ancestor of ``path`` holding a data stream manifest."""
    return _find_root(path, lambda p: read_data_stream_manifest(p).is_data_stream)


def _find_root(path: Union[str, Path], matches: Callable[[Path], bool]) -> Optional[str]:
    current = Path(os.path.abspath(path))
    while True:
        manifest_path = current / MANIFEST_FILE
        if manifest_path.is_file() and matches(manifest_path):
            return str(current)
        if current.parent == current:
            return None
        current = current.parent
