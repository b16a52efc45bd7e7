"""CLI entry point for ingest-test.

Usage:
    ingest-test [TEST_TYPE] [options]
"""

import logging
import sys
from typing import Optional

import click

from .config import Config
from .discovery import find_package_root, find_test_folders
from .errors import IngestTestError, TestRunError
from .reporting import REPORT_OUTPUTS, default_reporter_registry, write_report
from .reporting.human_reporter import FORMAT_HUMAN
from .runner import RunnerRegistry, TestOptions, TestResult, default_runner_registry
from .runner.pipeline import TEST_TYPE as PIPELINE_TEST_TYPE
from .transport import ElasticsearchClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TESTS_FAILED = 1
EXIT_RUN_ERROR = 2


@click.command()
@click.argument("test_type", default=PIPELINE_TEST_TYPE)
@click.option(
    "--package-root",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Package directory (or any directory inside it).",
)
@click.option("--data-streams", "-d", default="", help="Comma-separated data streams to test.")
@click.option("--generate", "-g", is_flag=True, help="Regenerate expected result files.")
@click.option("--report-format", default=FORMAT_HUMAN, show_default=True, help="xUnit, human or json.")
@click.option(
    "--report-output",
    type=click.Choice(REPORT_OUTPUTS),
    default=REPORT_OUTPUTS[0],
    show_default=True,
)
@click.option("--report-dir", type=click.Path(file_okay=False), default=None, help="Directory for file reports.")
@click.option("--es-host", default=None, help="Elasticsearch URL (overrides ELASTICSEARCH_HOST).")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(
    test_type: str,
    package_root: str,
    data_streams: str,
    generate: bool,
    report_format: str,
    report_output: str,
    report_dir: Optional[str],
    es_host: Optional[str],
    verbose: bool,
):
    """Run package tests of TEST_TYPE against Elasticsearch."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    runners = default_runner_registry()
    reporters = default_reporter_registry()

    if test_type not in runners:
        raise click.BadParameter(
            f"unsupported test type (available: {', '.join(runners.tags())})",
            param_hint="TEST_TYPE",
        )
    if report_format not in reporters:
        raise click.BadParameter(
            f"unsupported report format (available: {', '.join(reporters.tags())})",
            param_hint="--report-format",
        )

    try:
        config = Config.from_environment()
    except ValueError as e:
        raise click.ClickException(f"invalid environment configuration: {e}") from e
    if es_host:
        config.elasticsearch_host = es_host

    root = find_package_root(package_root)
    if root is None:
        raise click.ClickException(f"package root not found (path: {package_root})")

    selected = [ds.strip() for ds in data_streams.split(",") if ds.strip()]
    folders = find_test_folders(root, test_type, selected or None)
    if not folders:
        logger.warning("No %s test folders found in %s", test_type, root)

    with ElasticsearchClient.from_config(config) as es_client:
        results, exit_code = run_test_folders(
            runners, test_type, folders, es_client, generate
        )

    try:
        report = reporters.report(report_format, results)
        path = write_report(report, report_format, test_type, report_output, report_dir)
    except (IngestTestError, OSError) as e:
        raise click.ClickException(f"error writing test report: {e}") from e
    if path is not None:
        logger.info("Report written to %s", path)

    sys.exit(exit_code)


def run_test_folders(
    runners: RunnerRegistry,
    test_type: str,
    folders: list,
    es_client,
    generate: bool,
) -> tuple[list[TestResult], int]:
    """Run every test folder through the registered runner.

    A run that cannot complete stops the remaining folders.

    Returns:
        All collected results and the process exit code.
    """
    results: list[TestResult] = []
    exit_code = EXIT_OK

    for folder in folders:
        logger.info("Running %s tests for %s/%s", test_type, folder.package, folder.data_stream)
        options = TestOptions(
            test_folder=folder,
            es_client=es_client,
            generate_test_result=generate,
        )
        try:
            results.extend(runners.run(test_type, options))
        except TestRunError as e:
            results.extend(e.results)
            if not e.is_mismatch:
                logger.error("error running %s tests: %s", test_type, e)
                return results, EXIT_RUN_ERROR
            # every case ran, keep going with the next folder
            logger.error("%s/%s: %s", folder.package, folder.data_stream, e)
            exit_code = EXIT_TESTS_FAILED

    return results, exit_code


if __name__ == "__main__":
    main()
