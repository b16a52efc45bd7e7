"""Setup configuration for ingest-test tool."""

from setuptools import setup, find_packages

setup(
    name="ingest-test",
    version="0.1.0",
    description="Pipeline test runner for Elasticsearch ingest pipelines",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "requests>=2.31.0",
        "pyyaml>=6.0",
        "click>=8.1.0",
        "deepdiff>=6.0",
        "rich>=13.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ingest-test=ingest_test.cli:main",
        ],
    },
)
