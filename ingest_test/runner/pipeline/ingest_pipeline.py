"""Installation, removal and simulation of data stream ingest pipelines."""

import json
import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ...cases.schema import TestCase
from ...discovery.manifest import MANIFEST_FILE, read_data_stream_manifest
from ...errors import ElasticsearchError, IngestTestError, PipelineInstallError

logger = logging.getLogger(__name__)

INGEST_PIPELINE_DIR = Path("elasticsearch") / "ingest_pipeline"
PIPELINE_FILE_PATTERNS = ("*.json", "*.yml")
INGEST_PIPELINE_TAG = re.compile(r'{{\s*IngestPipeline\s+"([^"]+)"\s*}}')


@dataclass
class PipelineResource:
    """A pipeline definition ready to be installed."""
    name: str
    format: str  # "json" or "yml"
    content: str

    def definition(self) -> dict[str, Any]:
        """Parse the pipeline body into the JSON document Elasticsearch expects."""
        try:
            if self.format == "yml":
                data = yaml.safe_load(self.content)
            else:
                data = json.loads(self.content)
        except (ValueError, yaml.YAMLError) as e:
            raise PipelineInstallError(f"parsing pipeline {self.name} failed: {e}") from e

        if not isinstance(data, dict):
            raise PipelineInstallError(f"pipeline {self.name} must be an object")
        return data


def pipeline_name_with_nonce(pipeline_name: str, nonce: int) -> str:
    return f"{pipeline_name}-{nonce}"


def load_ingest_pipeline_files(data_stream_path: Union[str, Path], nonce: int) -> list[PipelineResource]:
    """Read every pipeline file of a data stream.

    ``{{ IngestPipeline "name" }}`` references are rewritten to the nonce
    suffixed names so that pipelines delegate to their installed siblings.
    """
    pipeline_dir = Path(data_stream_path) / INGEST_PIPELINE_DIR
    paths: list[Path] = []
    for pattern in PIPELINE_FILE_PATTERNS:
        paths.extend(sorted(pipeline_dir.glob(pattern)))

    pipelines = []
    for path in paths:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise PipelineInstallError(f"reading ingest pipeline failed (path: {path}): {e}") from e

        content = INGEST_PIPELINE_TAG.sub(
            lambda m: pipeline_name_with_nonce(m.group(1), nonce), content
        )
        base_name = path.name.split(".", 1)[0]
        pipelines.append(PipelineResource(
            name=pipeline_name_with_nonce(base_name, nonce),
            format=path.suffix[1:],
            content=content,
        ))
    return pipelines


def install_ingest_pipelines(es_client, data_stream_path: Union[str, Path]) -> tuple[str, list[str]]:
    """Install the ingest pipelines of a data stream.

    Args:
        es_client: Elasticsearch client.
        data_stream_path: Data stream root directory.

    Returns:
        The entry pipeline id and the ids of every installed pipeline.

    Raises:
        ManifestError: If the data stream manifest cannot be read.
        PipelineInstallError: If no pipeline could be loaded or installed.
    """
    manifest = read_data_stream_manifest(Path(data_stream_path) / MANIFEST_FILE)
    nonce = time.time_ns()
    entry_pipeline = pipeline_name_with_nonce(manifest.pipeline_name, nonce)

    pipelines = load_ingest_pipeline_files(data_stream_path, nonce)
    if not pipelines:
        raise PipelineInstallError(
            f"no ingest pipelines found (path: {Path(data_stream_path) / INGEST_PIPELINE_DIR})"
        )

    pipeline_ids = [p.name for p in pipelines]
    if entry_pipeline not in pipeline_ids:
        raise PipelineInstallError(
            f"entry pipeline {manifest.pipeline_name} not found among {', '.join(pipeline_ids)}"
        )

    installed: list[str] = []
    try:
        for pipeline in pipelines:
            _install_pipeline(es_client, pipeline, installed)
    except IngestTestError:
        _rollback(es_client, installed)
        raise

    logger.debug("Installed ingest pipelines: %s", ", ".join(pipeline_ids))
    return entry_pipeline, pipeline_ids


def _install_pipeline(es_client, pipeline: PipelineResource, installed: list[str]) -> None:
    definition = pipeline.definition()
    try:
        es_client.put_pipeline(pipeline.name, definition)
        installed.append(pipeline.name)
        # read back to make sure the pipeline is in place
        es_client.get_pipeline(pipeline.name)
    except ElasticsearchError as e:
        raise PipelineInstallError(f"installing pipeline {pipeline.name} failed: {e}") from e


def _rollback(es_client, installed: list[str]) -> None:
    if not installed:
        return
    try:
        uninstall_ingest_pipelines(es_client, installed)
    except ElasticsearchError as e:
        logger.warning("removing partially installed ingest pipelines failed: %s", e)


def uninstall_ingest_pipelines(es_client, pipeline_ids: list[str]) -> None:
    """Delete every pipeline in ``pipeline_ids``.

    All ids are attempted; the first failure is raised afterwards.
    """
    first_error: Optional[ElasticsearchError] = None
    for pipeline_id in pipeline_ids:
        try:
            es_client.delete_pipeline(pipeline_id)
        except ElasticsearchError as e:
            logger.debug("Deleting pipeline %s failed: %s", pipeline_id, e)
            if first_error is None:
                first_error = e
    if first_error is not None:
        raise first_error


def simulate_pipeline_processing(
    es_client,
    pipeline_id: str,
    test_case: TestCase,
) -> list[Optional[dict[str, Any]]]:
    """Run the test case events through the entry pipeline.

    Returns:
        Processed event sources, one per input event. A document that
        failed processing is returned as None.

    Raises:
        ElasticsearchError: If the simulate call fails or answers with malformed documents.
    """
    docs = es_client.simulate(pipeline_id, test_case.events)

    events: list[Optional[dict[str, Any]]] = []
    for i, doc in enumerate(docs):
        if not isinstance(doc, dict):
            raise ElasticsearchError(f"unexpected simulate response: docs[{i}] is a {type(doc).__name__}")
        processed = doc.get("doc")
        if processed is None:
            logger.warning("Document %d of %s was not processed: %s", i, test_case.name, doc.get("error"))
            events.append(None)
            continue
        if not isinstance(processed, dict):
            raise ElasticsearchError(f"unexpected simulate response: docs[{i}].doc is a {type(processed).__name__}")
        events.append(processed.get("_source"))
    return events
