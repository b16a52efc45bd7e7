"""Transport module - Elasticsearch HTTP communication."""

from .es_client import ElasticsearchClient
from .retry_policy import (
    RETRYABLE_STATUSES,
    RetryPolicy,
    default_retry_policy,
    no_retry_policy,
)

__all__ = [
    "ElasticsearchClient",
    "RETRYABLE_STATUSES",
    "RetryPolicy",
    "default_retry_policy",
    "no_retry_policy",
]
