"""Shared fixtures: an in-memory Elasticsearch and package trees on disk."""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest
import yaml

from ingest_test.errors import ElasticsearchError
from ingest_test.runner.result import TestFolder, TestOptions


class FakeElasticsearch:
    """Implements the client surface used by the pipeline runner.

    Simulation applies ``set`` and ``pipeline`` processors of the installed
    definitions, which is enough to produce observable output.
    """

    def __init__(self, ingested: str | None = None):
        self.pipelines: dict[str, dict] = {}
        self.put_calls: list[str] = []
        self.deleted: list[str] = []
        self.simulated: list[tuple[str, list[dict]]] = []
        self.failures: dict[str, ElasticsearchError] = {}
        self.ingested = ingested

    def fail(self, operation: str, status_code: int = 500) -> None:
        self.failures[operation] = ElasticsearchError(
            f"unexpected response status for {operation} ({status_code})", status_code
        )

    def _check(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]

    def put_pipeline(self, pipeline_id, definition):
        self._check("put_pipeline")
        self.put_calls.append(pipeline_id)
        self.pipelines[pipeline_id] = definition

    def get_pipeline(self, pipeline_id):
        self._check("get_pipeline")
        if pipeline_id not in self.pipelines:
            raise ElasticsearchError(f"pipeline {pipeline_id} missing", 404)
        return {pipeline_id: self.pipelines[pipeline_id]}

    def delete_pipeline(self, pipeline_id):
        self._check("delete_pipeline")
        self.pipelines.pop(pipeline_id, None)
        self.deleted.append(pipeline_id)

    def simulate(self, pipeline_id, documents):
        self._check("simulate")
        self.simulated.append((pipeline_id, documents))
        if pipeline_id not in self.pipelines:
            raise ElasticsearchError(f"pipeline {pipeline_id} missing", 404)
        docs = []
        for source in documents:
            processed = self._apply(pipeline_id, copy.deepcopy(source))
            if self.ingested:
                processed.setdefault("event", {})["ingested"] = self.ingested
            docs.append({"doc": {"_index": "_index", "_source": processed}})
        return docs

    def _apply(self, pipeline_id, source):
        for processor in self.pipelines[pipeline_id].get("processors", []):
            if "set" in processor:
                source[processor["set"]["field"]] = processor["set"]["value"]
            elif "pipeline" in processor:
                source = self._apply(processor["pipeline"]["name"], source)
        return source

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass


DEFAULT_PIPELINE = """\
description: Pipeline for access logs
processors:
  - set:
      field: processed
      value: true
  - pipeline:
      name: '{{ IngestPipeline "enrich" }}'
"""

ENRICH_PIPELINE = {
    "description": "Enrichment",
    "processors": [{"set": {"field": "source", "value": "enrich"}}],
}


class PackageBuilder:
    """Builds an integration package with one data stream under a directory."""

    def __init__(self, root: Path, package: str = "nginx", data_stream: str = "access"):
        self.root = root / package
        self.package = package
        self.data_stream = data_stream
        self.data_stream_path = self.root / "data_stream" / data_stream
        self.test_path = self.data_stream_path / "_dev" / "test" / "pipeline"

        self.test_path.mkdir(parents=True)
        _write_yaml(self.root / "manifest.yml", {
            "name": package,
            "title": package.title(),
            "version": "1.0.0",
            "type": "integration",
        })
        _write_yaml(self.data_stream_path / "manifest.yml", {
            "title": f"{data_stream} logs",
            "type": "logs",
        })
        pipeline_dir = self.data_stream_path / "elasticsearch" / "ingest_pipeline"
        pipeline_dir.mkdir(parents=True)
        (pipeline_dir / "default.yml").write_text(DEFAULT_PIPELINE, encoding="utf-8")
        (pipeline_dir / "enrich.json").write_text(json.dumps(ENRICH_PIPELINE), encoding="utf-8")

    def add_events_case(self, name: str, events: list[dict], expected: list | None = None) -> Path:
        path = self.test_path / name
        path.write_text(json.dumps({"events": events}), encoding="utf-8")
        if expected is not None:
            self.add_expected(name, expected)
        return path

    def add_expected(self, name: str, expected: list) -> Path:
        path = self.test_path / f"{name}-expected.json"
        path.write_text(json.dumps({"expected": expected}), encoding="utf-8")
        return path

    def add_file(self, name: str, content: str) -> Path:
        path = self.test_path / name
        path.write_text(content, encoding="utf-8")
        return path

    @property
    def folder(self) -> TestFolder:
        return TestFolder(path=str(self.test_path), package=self.package, data_stream=self.data_stream)

    def options(self, es_client, generate: bool = False) -> TestOptions:
        return TestOptions(test_folder=self.folder, es_client=es_client, generate_test_result=generate)


def processed(event: dict) -> dict:
    """Expected output of the package pipelines for an input event."""
    return {**event, "processed": True, "source": "enrich"}


def _write_yaml(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


@pytest.fixture
def fake_es():
    return FakeElasticsearch()


@pytest.fixture
def package(tmp_path):
    return PackageBuilder(tmp_path)
