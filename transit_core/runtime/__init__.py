"""
Service runtime layer for transit-http.

This package executes requests and governs recovery:
- BackendService: Runs requests through a transport with recovery
- RecoveryController: Decides retry, exhaustion or failure per attempt
- RetryPolicy: Which failures look transient and how long to back off
- HttpxTransport: Transport binding for httpx.AsyncClient
"""

from .recovery import (
    Fail,
    RecoveryController,
    RecoveryDisposition,
    RecoveryState,
    RecoveryStrategy,
    RefreshHeadersStrategy,
    Retry,
    RetryFailedRequests,
    Transition,
)
from .retry import DEFAULT_RETRY_POLICY, IMMEDIATE_RETRY_POLICY, RetryPolicy
from .service import BackendService
from .transport import HttpxTransport, Transport

__all__ = [
    "BackendService",
    "DEFAULT_RETRY_POLICY",
    "Fail",
    "HttpxTransport",
    "IMMEDIATE_RETRY_POLICY",
    "RecoveryController",
    "RecoveryDisposition",
    "RecoveryState",
    "RecoveryStrategy",
    "RefreshHeadersStrategy",
    "Retry",
    "RetryFailedRequests",
    "RetryPolicy",
    "Transition",
    "Transport",
]
