"""Retry policy for Elasticsearch requests.

Transport failures and overload statuses are retried with exponential
backoff. Any other error status is returned to the caller immediately.
"""

from dataclasses import dataclass, field
from typing import Optional

# Statuses Elasticsearch returns when it is overloaded or restarting.
RETRYABLE_STATUSES = frozenset({429, 502, 503, 504})


@dataclass
class RetryPolicy:
    """Bounded exponential backoff for Elasticsearch calls."""
    max_retries: int = 3
    initial_delay: float = 0.5
    backoff_factor: float = 2.0
    max_delay: float = 10.0
    retry_statuses: frozenset[int] = field(default_factory=lambda: RETRYABLE_STATUSES)

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after the failed ``attempt`` (0 = first request)."""
        return min(self.initial_delay * self.backoff_factor ** attempt, self.max_delay)

    def should_retry(self, attempt: int, status_code: Optional[int] = None) -> bool:
        """Whether another request may follow the failed ``attempt``.

        A ``status_code`` of None means the request failed at transport level.
        """
        if attempt >= self.max_retries:
            return False
        if status_code is None:
            return True
        return status_code in self.retry_statuses


def default_retry_policy() -> RetryPolicy:
    return RetryPolicy()


def no_retry_policy() -> RetryPolicy:
    """A policy that gives up after the first failure."""
    return RetryPolicy(max_retries=0)
