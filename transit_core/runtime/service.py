"""
Execution entry point.

BackendService runs a Request through a Transport, transforms the outcome
and consults the RecoveryController after each failure. Attempts for one
call are strictly sequential. The caller always receives exactly one of
Success(value) or Failure(error); raw transport and decoding exceptions
never escape, apart from task cancellation and decoder contract violations.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger

from transit_core.request.decoding import DecoderContractViolation
from transit_core.request.outcome import NetworkServiceSuccess
from transit_core.request.request import Request
from transit_core.request.result import Failure, Result, Success

from .recovery import RecoveryController, RecoveryState, RetryFailedRequests
from .retry import RetryPolicy
from .transport import Transport

TransitionCallback = Callable[[RecoveryState, Request], None]


class BackendService:
    """Executes requests with recovery.

    Args:
        transport: Collaborator that performs the network round trip.
        recovery: Controller consulted after every failed attempt.
            Defaults to retrying transient transport/service failures.
        backoff: Policy used to space out retries. No delay when None.
        sleep: Awaitable used to wait between attempts.
        on_transition: Optional callback receiving every state change.

    Example:
        service = BackendService(HttpxTransport())
        result = await service.execute(request.using_max_recovery_attempts(2))
    """

    def __init__(
        self,
        transport: Transport,
        recovery: RecoveryController | None = None,
        backoff: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        on_transition: TransitionCallback | None = None,
    ):
        self.transport = transport
        self.recovery = recovery or RecoveryController([RetryFailedRequests()])
        self.backoff = backoff
        self._sleep = sleep
        self._on_transition = on_transition

    def _transition(self, state: RecoveryState, request: Request) -> None:
        if self._on_transition is not None:
            self._on_transition(state, request)

    async def execute(self, request: Request) -> Result[Any, Any]:
        """Execute ``request`` until it succeeds or recovery gives up.

        Returns:
            Success with the transformed value, or Failure with the request's
            error type.

        Raises:
            DecoderContractViolation: The decoder failed with a non-structural error.
            asyncio.CancelledError: The awaiting task was cancelled.
        """
        current = request
        while True:
            self._transition(RecoveryState.PENDING, current)
            outcome = await self.transport.execute(current)

            if isinstance(outcome, NetworkServiceSuccess):
                result = self._transform(current, outcome)
                if isinstance(result, Success):
                    self._transition(RecoveryState.SUCCEEDED, current)
                    return result
                error = result.error
            else:
                error = current.make_failure_error(outcome)

            self._transition(RecoveryState.EVALUATING, current)
            transition = await self.recovery.evaluate(current, error)
            debug_id = getattr(error, "debug_id", "-")

            if transition.state is RecoveryState.EXHAUSTED:
                logger.warning(
                    f"[{debug_id}] Max recovery attempts ({current.max_recovery_attempts}) "
                    f"exceeded for {current.method.value} {current.url}: {error}"
                )
                self._transition(RecoveryState.EXHAUSTED, current)
                return Failure(error)

            if transition.state is not RecoveryState.PENDING or transition.request is None:
                logger.warning(
                    f"[{debug_id}] Unrecoverable failure for "
                    f"{current.method.value} {current.url}: {error}"
                )
                self._transition(RecoveryState.FAILED, current)
                return Failure(error)

            delay = (
                self.backoff.delay_for(
                    current.recovery_attempt_count, getattr(error, "failure_response", None)
                )
                if self.backoff
                else 0.0
            )
            limit = current.max_recovery_attempts if current.max_recovery_attempts is not None else "unbounded"
            logger.info(
                f"[{debug_id}] Retry {current.recovery_attempt_count + 1}/{limit} "
                f"for {current.method.value} {current.url} in {delay:.2f}s"
            )
            if delay > 0:
                await self._sleep(delay)
            current = transition.request

    async def execute_or_raise(self, request: Request) -> Any:
        """Execute ``request`` and return the value, raising the error on failure."""
        result = await self.execute(request)
        return result.unwrap()

    @staticmethod
    def _transform(request: Request, outcome: NetworkServiceSuccess) -> Result[Any, Any]:
        try:
            result = request.transform_success(outcome)
        except DecoderContractViolation as e:
            logger.error(f"Decoder contract violated for {request.method.value} {request.url}: {e}")
            raise
        if not isinstance(result, (Success, Failure)):
            raise TypeError(
                f"transformer for {request.url} returned {type(result).__name__}, "
                "expected Success or Failure"
            )
        return result
