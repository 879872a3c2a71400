"""
Backoff and transient-failure rules.

RetryPolicy answers two questions for the recovery layer: does a failed
attempt look transient, and how long to wait before the next one. How many
attempts a request may make is decided by the Request itself
(max_recovery_attempts).
"""

from __future__ import annotations

import random

from pydantic import BaseModel, Field

from transit_core.request.outcome import NetworkServiceError, ServiceErrorKind
from transit_core.request.vocabulary import HTTPResponse


def retry_after_seconds(response: HTTPResponse | None) -> float | None:
    """Read a delta-seconds Retry-After header, if present."""
    if response is None:
        return None
    for key, value in response.headers.items():
        if key.lower() == "retry-after":
            try:
                return max(float(value), 0.0)
            except ValueError:
                # HTTP-date form is not honored
                return None
    return None


class RetryPolicy(BaseModel):
    """Exponential backoff for re-issued requests.

    The wait before recovery attempt N (0-indexed) is
    ``min(base_delay * multiplier ** N, max_delay)``, plus up to
    ``jitter_ratio`` of that when jitter is on. A server-provided Retry-After
    replaces the computed wait when ``respect_retry_after`` is set.
    """

    base_delay: float = Field(default=1.0, ge=0)
    max_delay: float = Field(default=60.0, ge=0)
    multiplier: float = Field(default=2.0, ge=1)
    jitter: bool = True
    jitter_ratio: float = Field(default=0.25, ge=0, le=1)
    respect_retry_after: bool = True
    transient_statuses: frozenset[int] = frozenset({429, 502, 503, 504})
    transient_kinds: frozenset[ServiceErrorKind] = frozenset(
        {ServiceErrorKind.TIMED_OUT, ServiceErrorKind.NO_INTERNET_CONNECTION}
    )

    model_config = {"frozen": True}

    def delay_for(self, attempt: int, response: HTTPResponse | None = None) -> float:
        """Seconds to wait before recovery attempt ``attempt``."""
        if self.respect_retry_after:
            server_delay = retry_after_seconds(response)
            if server_delay is not None:
                return min(server_delay, self.max_delay)

        delay = min(self.base_delay * (self.multiplier**attempt), self.max_delay)
        if self.jitter:
            delay += delay * self.jitter_ratio * random.random()
        return delay

    def is_transient(
        self, error: NetworkServiceError, response: HTTPResponse | None = None
    ) -> bool:
        """Whether a service failure is worth another attempt.

        A received response is judged by its status; otherwise the failure
        kind decides. Cancellation never is.
        """
        if error.is_cancellation:
            return False
        if response is not None:
            return response.status in self.transient_statuses
        return error.kind in self.transient_kinds


DEFAULT_RETRY_POLICY = RetryPolicy()

# No waiting between attempts
IMMEDIATE_RETRY_POLICY = RetryPolicy(base_delay=0.0, jitter=False, respect_retry_after=False)
