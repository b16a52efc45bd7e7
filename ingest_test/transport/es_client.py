"""HTTP client for the Elasticsearch ingest API.

Implements the subset of the REST API used by pipeline tests:
- PUT    /_ingest/pipeline/:id            - Install a pipeline
- GET    /_ingest/pipeline/:id            - Read a pipeline back
- DELETE /_ingest/pipeline/:id            - Remove a pipeline
- POST   /_ingest/pipeline/:id/_simulate  - Run documents through a pipeline
"""

import json
import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import requests

from ..errors import ElasticsearchConnectionError, ElasticsearchError
from .retry_policy import RetryPolicy, default_retry_policy

logger = logging.getLogger(__name__)


class ElasticsearchClient:
    """Thin requests-based client for Elasticsearch ingest endpoints."""

    def __init__(
        self,
        base_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        retry_policy: Optional[RetryPolicy] = None,
        request_timeout: float = 30.0,
        verify_certs: bool = True,
    ):
        """Initialize the client.

        Args:
            base_url: Elasticsearch URL (e.g., http://localhost:9200).
            username: Basic auth user. Auth is only sent with a password.
            password: Basic auth password.
            retry_policy: Retry policy for failed requests.
            request_timeout: Default request timeout in seconds.
            verify_certs: Verify TLS certificates.
        """
        self.base_url = base_url.rstrip("/")
        self.retry_policy = retry_policy or default_retry_policy()
        self.request_timeout = request_timeout
        self._session = requests.Session()
        self._session.verify = verify_certs
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        if password:
            self._session.auth = (username or "elastic", password)

    @classmethod
    def from_config(cls, config) -> "ElasticsearchClient":
        """Create a client from a :class:`ingest_test.config.Config`."""
        return cls(
            config.elasticsearch_host,
            username=config.elasticsearch_username,
            password=config.elasticsearch_password,
            retry_policy=RetryPolicy(max_retries=config.max_retries),
            request_timeout=config.request_timeout,
            verify_certs=config.verify_certs,
        )

    def put_pipeline(self, pipeline_id: str, definition: dict[str, Any]) -> None:
        """Install or replace an ingest pipeline."""
        self._request("PUT", self._pipeline_path(pipeline_id), "PutPipeline", json=definition)

    def get_pipeline(self, pipeline_id: str) -> dict[str, Any]:
        """Return the stored definition of an ingest pipeline."""
        response = self._request("GET", self._pipeline_path(pipeline_id), "GetPipeline")
        return _json_object(response, "GetPipeline")

    def delete_pipeline(self, pipeline_id: str) -> None:
        """Remove an ingest pipeline."""
        self._request("DELETE", self._pipeline_path(pipeline_id), "DeletePipeline")

    def simulate(self, pipeline_id: str, documents: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Run documents through an installed pipeline without indexing them.

        Args:
            pipeline_id: Pipeline to simulate.
            documents: Document sources.

        Returns:
            The ``docs`` entries of the simulate response, one per document.
        """
        body = {"docs": [{"_source": doc} for doc in documents]}
        response = self._request(
            "POST",
            f"{self._pipeline_path(pipeline_id)}/_simulate",
            "Simulate",
            json=body,
        )
        data = _json_object(response, "Simulate")
        docs = data.get("docs", [])
        if not isinstance(docs, list):
            raise ElasticsearchError(f"unexpected simulate response: 'docs' is a {type(docs).__name__}")
        return docs

    def health_check(self) -> bool:
        """Check if Elasticsearch is reachable.

        Returns:
            True if server responds.
        """
        try:
            response = self._session.get(f"{self.base_url}/", timeout=5)
            return response.status_code < 500
        except (requests.ConnectionError, requests.Timeout):
            return False

    def _pipeline_path(self, pipeline_id: str) -> str:
        return f"/_ingest/pipeline/{quote(pipeline_id, safe='')}"

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        **kwargs,
    ) -> requests.Response:
        """Execute HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Request path below the base URL.
            operation: Operation name used in error messages.
            **kwargs: Additional arguments for requests.

        Returns:
            Response object with a 2xx status.

        Raises:
            ElasticsearchError: On a non-2xx status after retries.
            ElasticsearchConnectionError: If Elasticsearch is unreachable after retries.
        """
        url = f"{self.base_url}{path}"
        kwargs.setdefault("timeout", self.request_timeout)
        attempt = 0

        while True:
            try:
                response = self._session.request(method, url, **kwargs)
            except (requests.ConnectionError, requests.Timeout) as e:
                if self.retry_policy.should_retry(attempt):
                    self._backoff(attempt, operation, str(e))
                    attempt += 1
                    continue
                raise ElasticsearchConnectionError(
                    f"could not connect to Elasticsearch at {self.base_url} ({operation}): {e}"
                ) from e

            if response.status_code < 300:
                return response

            if self.retry_policy.should_retry(attempt, response.status_code):
                self._backoff(attempt, operation, f"status {response.status_code}")
                attempt += 1
                continue

            raise ElasticsearchError(
                f"unexpected response status for {operation} ({response.status_code}): "
                f"{_error_details(response)}",
                status_code=response.status_code,
            )

    def _backoff(self, attempt: int, operation: str, reason: str) -> None:
        delay = self.retry_policy.backoff_delay(attempt)
        logger.debug("%s failed (%s), retrying in %.1fs", operation, reason, delay)
        time.sleep(delay)

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _error_details(response: requests.Response) -> str:
    """Extract error details from response."""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return json.dumps(response.json())
        except ValueError:
            pass
    return response.text


def _json_object(response: requests.Response, operation: str) -> dict[str, Any]:
    """Decode a response body that must be a JSON object."""
    try:
        data = response.json()
    except ValueError as e:
        raise ElasticsearchError(f"unmarshalling {operation} response failed: {e}") from e
    if not isinstance(data, dict):
        raise ElasticsearchError(
            f"unexpected {operation} response: expected a JSON object, got {type(data).__name__}"
        )
    return data
