"""Runtime configuration for ingest-test."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_HOST = "ELASTICSEARCH_HOST"
ENV_USERNAME = "ELASTICSEARCH_USERNAME"
ENV_PASSWORD = "ELASTICSEARCH_PASSWORD"
ENV_REQUEST_TIMEOUT = "ELASTICSEARCH_REQUEST_TIMEOUT"
ENV_VERIFY_CERTS = "ELASTICSEARCH_VERIFY_CERTS"
ENV_MAX_RETRIES = "ELASTICSEARCH_MAX_RETRIES"

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class Config:
    """Elasticsearch connection settings."""
    elasticsearch_host: str = "http://localhost:9200"
    elasticsearch_username: Optional[str] = None
    elasticsearch_password: Optional[str] = None
    request_timeout: float = 30.0
    verify_certs: bool = True
    max_retries: int = 3

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Create configuration from environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        config = cls()

        if env.get(ENV_HOST):
            config.elasticsearch_host = env[ENV_HOST]
        config.elasticsearch_username = env.get(ENV_USERNAME) or None
        config.elasticsearch_password = env.get(ENV_PASSWORD) or None

        if env.get(ENV_REQUEST_TIMEOUT):
            config.request_timeout = float(env[ENV_REQUEST_TIMEOUT])
        if env.get(ENV_VERIFY_CERTS):
            config.verify_certs = env[ENV_VERIFY_CERTS].strip().lower() not in _FALSE_VALUES
        if env.get(ENV_MAX_RETRIES):
            config.max_retries = int(env[ENV_MAX_RETRIES])

        return config
