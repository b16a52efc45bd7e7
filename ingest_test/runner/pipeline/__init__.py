"""Pipeline tests - simulate ingest pipelines against expected results."""

from .runner import TEST_TYPE, PipelineTestRunner, register, run

__all__ = ["TEST_TYPE", "PipelineTestRunner", "register", "run"]
