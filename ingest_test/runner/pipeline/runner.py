"""Pipeline test runner.

Coordinates the full pipeline test flow for one test folder:
1. List test case files
2. Locate the owning data stream
3. Install its ingest pipelines
4. Simulate each test case against the entry pipeline
5. Compare (or regenerate) expected results
6. Uninstall the pipelines
"""

import logging
import os
import time
from pathlib import Path

from ...cases.parser import load_test_case_file
from ...cases.schema import is_reserved_file
from ...discovery.manifest import find_data_stream_root
from ...errors import (
    ElasticsearchError,
    IngestTestError,
    TestCasesFailed,
    TestRunError,
)
from ..registry import RunnerRegistry
from ..result import TestOptions, TestResult
from .golden import compare_results, read_expected_result, write_expected_result
from .ingest_pipeline import (
    install_ingest_pipelines,
    simulate_pipeline_processing,
    uninstall_ingest_pipelines,
)

logger = logging.getLogger(__name__)

TEST_TYPE = "pipeline"


class PipelineTestRunner:
    """Runs the pipeline tests of one test folder."""

    def __init__(self, options: TestOptions):
        self.options = options

    @property
    def folder(self):
        return self.options.test_folder

    def run(self) -> list[TestResult]:
        """Run every test case in the folder.

        Returns:
            One TestResult per test case, in discovery order.

        Raises:
            TestCasesFailed: If every case ran but at least one did not
                match its expected result. Carries all results.
            TestRunError: If the run could not complete. Carries the
                results accumulated so far, including the aborting case.
        """
        try:
            test_case_files = self._list_test_case_files()
        except OSError as e:
            raise TestRunError(f"listing test case definitions failed: {e}") from e

        try:
            data_stream_path = find_data_stream_root(self.folder.path)
        except IngestTestError as e:
            raise TestRunError(f"locating data_stream root failed: {e}") from e
        if data_stream_path is None:
            raise TestRunError(f"data stream root not found (path: {self.folder.path})")

        try:
            entry_pipeline, pipeline_ids = install_ingest_pipelines(
                self.options.es_client, data_stream_path
            )
        except IngestTestError as e:
            raise TestRunError(f"installing ingest pipelines failed: {e}") from e

        try:
            return self._run_test_cases(test_case_files, entry_pipeline)
        finally:
            self._uninstall(pipeline_ids)

    def _run_test_cases(self, test_case_files: list[str], entry_pipeline: str) -> list[TestResult]:
        results: list[TestResult] = []
        failed_count = 0

        for test_case_file in test_case_files:
            tr = TestResult(
                test_type=TEST_TYPE,
                package=self.folder.package,
                data_stream=self.folder.data_stream,
                name=test_case_file,
            )
            results.append(tr)
            logger.info("Test case: %s", test_case_file)

            try:
                tc = load_test_case_file(Path(self.folder.path) / test_case_file)
            except IngestTestError as e:
                raise self._run_error(tr, results, "loading test case failed", e) from e

            start_time = time.monotonic()
            try:
                observed = simulate_pipeline_processing(self.options.es_client, entry_pipeline, tc)
            except ElasticsearchError as e:
                raise self._run_error(tr, results, "simulating pipeline processing failed", e) from e
            finally:
                tr.time_elapsed = time.monotonic() - start_time

            try:
                self._verify_results(test_case_file, observed)
            except IngestTestError as e:
                if not e.is_mismatch:
                    raise self._run_error(tr, results, "verifying test result failed", e) from e
                failed_count += 1
                tr.failure_msg = str(e)
                tr.failure_details = getattr(e, "details", "")
                logger.info("%s: %s", test_case_file, tr.failure_details)

        if failed_count:
            raise TestCasesFailed(results, failed_count)
        return results

    def _list_test_case_files(self) -> list[str]:
        path = self.folder.path
        names = sorted(os.listdir(path))
        return [
            name for name in names
            if os.path.isfile(os.path.join(path, name)) and not is_reserved_file(name)
        ]

    def _verify_results(self, test_case_file: str, observed: list) -> None:
        test_case_path = Path(self.folder.path) / test_case_file

        if self.options.generate_test_result:
            write_expected_result(test_case_path, observed)

        expected = read_expected_result(test_case_path)
        compare_results(expected, observed)

    def _run_error(
        self, tr: TestResult, results: list[TestResult], context: str, cause: Exception
    ) -> TestRunError:
        message = f"{context}: {cause}"
        tr.error_msg = message
        return TestRunError(message, results)

    def _uninstall(self, pipeline_ids: list[str]) -> None:
        try:
            uninstall_ingest_pipelines(self.options.es_client, pipeline_ids)
        except ElasticsearchError as e:
            logger.warning("uninstalling ingest pipelines failed: %s", e)


def run(options: TestOptions) -> list[TestResult]:
    """Run the pipeline tests defined under the given folder."""
    return PipelineTestRunner(options).run()


def register(registry: RunnerRegistry) -> None:
    registry.register(TEST_TYPE, run)
