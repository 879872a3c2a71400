"""
Recovery controller: decides whether a failed attempt is retried.

Each logical call moves through these states:

    PENDING(n) --failure--> EVALUATING --> PENDING(n+1) | EXHAUSTED | FAILED
    PENDING(n) --success--> SUCCEEDED

RecoveryController.evaluate is a function of (request, error). The only
state is the attempt count carried on the Request itself.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Protocol, Sequence, Union, runtime_checkable

from loguru import logger

from transit_core.request.request import Request
from transit_core.request.vocabulary import HeaderKey, HeaderValue

from .retry import DEFAULT_RETRY_POLICY, RetryPolicy


class RecoveryState(str, Enum):
    """States of a logical call."""

    PENDING = "pending"
    EVALUATING = "evaluating"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RecoveryState.SUCCEEDED, RecoveryState.EXHAUSTED, RecoveryState.FAILED)


@dataclass(frozen=True)
class Retry:
    """Retry with the given request (the attempt count is set by the controller)."""

    request: Request


@dataclass(frozen=True)
class Fail:
    """The error is not recoverable."""


RecoveryDisposition = Union[Retry, Fail]


@dataclass(frozen=True)
class Transition:
    """Result of evaluating a failure."""

    state: RecoveryState
    request: Request | None = None


@runtime_checkable
class RecoveryStrategy(Protocol):
    """Caller-supplied recovery behavior."""

    def can_attempt_recovery(self, error: Any, request: Request) -> bool:
        """Whether this strategy handles ``error``."""
        ...

    async def attempt_recovery(self, error: Any, request: Request) -> RecoveryDisposition:
        """Produce the request for the next attempt, or Fail()."""
        ...


def _service_error(error: Any) -> Any:
    return getattr(error, "network_service_error", None)


class RetryFailedRequests:
    """Re-issue requests whose failure the policy deems transient.

    Decoding failures carry no service error and are never retried here;
    a schema mismatch does not go away on a second attempt.
    """

    def __init__(self, policy: RetryPolicy | None = None):
        self.policy = policy or DEFAULT_RETRY_POLICY

    def can_attempt_recovery(self, error: Any, request: Request) -> bool:
        service_error = _service_error(error)
        if service_error is None:
            return False
        return self.policy.is_transient(service_error, getattr(error, "failure_response", None))

    async def attempt_recovery(self, error: Any, request: Request) -> RecoveryDisposition:
        return Retry(request)


HeaderProvider = Callable[[Any, Request], Awaitable[Mapping[HeaderKey, HeaderValue] | None]]


class RefreshHeadersStrategy:
    """Refresh headers (e.g. an expired token) and try again.

    Args:
        header_provider: Async callable receiving (error, request) and
            returning headers to merge into the next attempt, or None when
            the failure cannot be fixed.
        statuses: Failure statuses this strategy reacts to.

    Example:
        async def refresh(error, request):
            token = await auth.refresh()
            return {HeaderKey.AUTHORIZATION: HeaderValue.bearer(token)}

        RefreshHeadersStrategy(refresh, statuses=(401,))
    """

    def __init__(self, header_provider: HeaderProvider, statuses: Sequence[int] = (401,)):
        self.header_provider = header_provider
        self.statuses = tuple(statuses)

    def can_attempt_recovery(self, error: Any, request: Request) -> bool:
        response = getattr(error, "failure_response", None)
        return response is not None and response.status in self.statuses

    async def attempt_recovery(self, error: Any, request: Request) -> RecoveryDisposition:
        headers = await self.header_provider(error, request)
        if headers is None:
            return Fail()
        return Retry(request.adding_headers(headers))


class RecoveryController:
    """Decide the next state of a call after a failed attempt.

    Rules, in order:
    1. A cancelled attempt is FAILED.
    2. No recovery budget left is EXHAUSTED.
    3. The first strategy that can handle the error decides: Retry gives
       PENDING with the next request, Fail gives FAILED.
    4. No strategy handles the error: FAILED.
    """

    def __init__(self, strategies: Sequence[RecoveryStrategy] = ()):
        self.strategies = tuple(strategies)

    def strategy_for(self, request: Request, error: Any) -> RecoveryStrategy | None:
        for strategy in self.strategies:
            if strategy.can_attempt_recovery(error, request):
                return strategy
        return None

    async def evaluate(self, request: Request, error: Any) -> Transition:
        """Evaluate a failed attempt of ``request``.

        Returns:
            Transition to PENDING (with the request for the next attempt),
            EXHAUSTED or FAILED.
        """
        service_error = _service_error(error)
        if service_error is not None and service_error.is_cancellation:
            return Transition(RecoveryState.FAILED)

        if not request.can_attempt_recovery:
            return Transition(RecoveryState.EXHAUSTED)

        strategy = self.strategy_for(request, error)
        if strategy is None:
            return Transition(RecoveryState.FAILED)

        disposition = await strategy.attempt_recovery(error, request)
        if not isinstance(disposition, Retry):
            logger.debug(f"{type(strategy).__name__} reported {request!r} as unrecoverable")
            return Transition(RecoveryState.FAILED)

        next_request = dataclasses.replace(
            disposition.request,
            recovery_attempt_count=request.recovery_attempt_count + 1,
            max_recovery_attempts=request.max_recovery_attempts,
        )
        return Transition(RecoveryState.PENDING, next_request)
