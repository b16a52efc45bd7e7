"""Runner module - test result model, registries and test runners."""

from .registry import ReporterFunc, ReporterRegistry, Registry, RunnerFunc, RunnerRegistry
from .result import TestFolder, TestOptions, TestResult


def default_runner_registry() -> RunnerRegistry:
    """Create a registry with every built-in test runner registered."""
    from .pipeline import register as register_pipeline

    registry = RunnerRegistry()
    register_pipeline(registry)
    return registry


__all__ = [
    "Registry",
    "ReporterFunc",
    "ReporterRegistry",
    "RunnerFunc",
    "RunnerRegistry",
    "TestFolder",
    "TestOptions",
    "TestResult",
    "default_runner_registry",
]
