"""
Tests for manifest reading and package layout discovery.
"""

from __future__ import annotations

import pytest

from ingest_test.discovery import (
    find_data_stream_root,
    find_package_root,
    find_test_folders,
    read_data_stream_manifest,
    read_package_manifest,
)
from ingest_test.errors import ManifestError


def test_find_data_stream_root(package):
    assert find_data_stream_root(package.test_path) == str(package.data_stream_path)


def test_find_package_root(package):
    assert find_package_root(package.test_path) == str(package.root)
    assert find_package_root(package.root) == str(package.root)


def test_roots_not_found(tmp_path):
    assert find_package_root(tmp_path) is None
    assert find_data_stream_root(tmp_path) is None


def test_non_data_stream_manifest_is_skipped(package):
    # the package manifest is not a data stream manifest
    assert find_data_stream_root(package.root) is None


def test_malformed_manifest_is_an_error(tmp_path):
    (tmp_path / "manifest.yml").write_text("title: [unclosed\n")

    with pytest.raises(ManifestError, match="reading manifest file failed"):
        find_data_stream_root(tmp_path)


def test_manifest_must_be_mapping(tmp_path):
    path = tmp_path / "manifest.yml"
    path.write_text("- a\n")

    with pytest.raises(ManifestError, match="must be a YAML mapping"):
        read_package_manifest(path)


def test_read_manifests(package):
    manifest = read_package_manifest(package.root / "manifest.yml")
    assert manifest.name == "nginx"
    assert manifest.is_integration

    ds = read_data_stream_manifest(package.data_stream_path / "manifest.yml")
    assert ds.is_data_stream
    assert ds.pipeline_name == "default"


def test_find_test_folders(package):
    (package.root / "data_stream" / "error" / "_dev" / "test" / "pipeline").mkdir(parents=True)
    (package.root / "data_stream" / "status").mkdir()

    folders = find_test_folders(package.root, "pipeline")

    assert [(f.package, f.data_stream) for f in folders] == [("nginx", "access"), ("nginx", "error")]
    assert folders[0].path == str(package.test_path)


def test_find_test_folders_filtered(package):
    (package.root / "data_stream" / "error" / "_dev" / "test" / "pipeline").mkdir(parents=True)

    folders = find_test_folders(package.root, "pipeline", ["error"])

    assert [f.data_stream for f in folders] == ["error"]


def test_find_test_folders_other_type(package):
    assert find_test_folders(package.root, "system") == []
