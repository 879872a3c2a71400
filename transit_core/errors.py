"""
Standardized error model for request execution.

ServiceError is the stock error type for requests. It can be built from a
failed attempt (transport problem or non-2xx status) and from a structural
decoding failure, so it satisfies both construction contracts in
transit_core.request.contracts.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from transit_core.request.decoding import DecodingError
    from transit_core.request.outcome import NetworkServiceError, NetworkServiceFailure
    from transit_core.request.vocabulary import HTTPResponse


# Common error codes
class ErrorCode:
    """Standard error codes for common failure scenarios."""

    # Network/connectivity
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    CANCELLED = "CANCELLED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Status
    REDIRECTION = "REDIRECTION"
    CLIENT_ERROR = "CLIENT_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    INVALID_STATUS = "INVALID_STATUS"

    # Authentication/Authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Lookup
    NOT_FOUND = "NOT_FOUND"

    # Rate limiting
    RATE_LIMITED = "RATE_LIMITED"

    # Decoding
    DECODING_FAILED = "DECODING_FAILED"

    UNKNOWN = "UNKNOWN"


# Keyed by ServiceErrorKind value
_KIND_CODES = {
    "unknown": ErrorCode.UNKNOWN,
    "no_internet_connection": ErrorCode.CONNECTION_ERROR,
    "timed_out": ErrorCode.TIMEOUT,
    "cancelled": ErrorCode.CANCELLED,
    "redirection": ErrorCode.REDIRECTION,
    "client_error": ErrorCode.CLIENT_ERROR,
    "server_error": ErrorCode.SERVER_ERROR,
    "invalid_status_code": ErrorCode.INVALID_STATUS,
}

_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    429: ErrorCode.RATE_LIMITED,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


class ServiceError(Exception):
    """Standardized request error.

    ServiceError carries structured information about failures:
    - code: Machine-readable error code (e.g., "TIMEOUT")
    - message_safe: Human-readable message safe for logs/users
    - message_debug: Detailed debug info (not logged in production)
    - retryable: Whether DEFAULT_RETRY_POLICY treats the failure as transient
    - cause: The underlying exception, if any
    - debug_id: Unique ID for support correlation

    Errors built by from_service_failure also keep the originating
    network_service_error and failure_response; errors built by
    from_decoding_failure keep the decoded type and the raw bytes.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        retryable: bool = False,
        cause: BaseException | None = None,
        debug_id: str | None = None,
        network_service_error: "NetworkServiceError | None" = None,
        failure_response: "HTTPResponse | None" = None,
        decoding: type | None = None,
        data: bytes | None = None,
    ):
        """Initialize a ServiceError.

        Args:
            code: Machine-readable error code.
            message_safe: Human-readable message safe for logs.
            message_debug: Optional detailed debug message.
            retryable: Whether the failure looks transient.
            cause: Optional underlying exception.
            debug_id: Optional correlation ID (auto-generated if None).
            network_service_error: Service failure this error was built from.
            failure_response: Response available at failure time.
            decoding: Type that failed to decode.
            data: Raw bytes that failed to decode.
        """
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.retryable = retryable
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]
        self._network_service_error = network_service_error
        self._failure_response = failure_response
        self.decoding = decoding
        self.data = data

    @classmethod
    def from_service_failure(cls, failure: "NetworkServiceFailure") -> "ServiceError":
        """Build an error from a failed attempt."""
        from transit_core.runtime.retry import DEFAULT_RETRY_POLICY

        response = failure.response
        code = _KIND_CODES.get(failure.error.kind.value, ErrorCode.UNKNOWN)
        if response is not None:
            code = _STATUS_CODES.get(response.status, code)
            message_safe = f"Request failed with status {response.status}"
            message_debug = response.body[:500].decode("utf-8", "replace") or None
        else:
            message_safe = f"Request failed: {failure.error.kind.value}"
            message_debug = repr(failure.error.cause) if failure.error.cause else None

        return cls(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=DEFAULT_RETRY_POLICY.is_transient(failure.error, response),
            cause=failure.error.cause,
            network_service_error=failure.error,
            failure_response=response,
        )

    @classmethod
    def from_decoding_failure(
        cls, error: "DecodingError", decoding: type, data: bytes
    ) -> "ServiceError":
        """Build an error from a decode failure."""
        name = getattr(decoding, "__name__", repr(decoding))
        return cls(
            code=ErrorCode.DECODING_FAILED,
            message_safe=f"Response could not be decoded as {name}",
            message_debug=error.message,
            retryable=False,
            cause=error,
            decoding=decoding,
            data=data,
        )

    @property
    def network_service_error(self) -> "NetworkServiceError | None":
        return self._network_service_error

    @property
    def failure_response(self) -> "HTTPResponse | None":
        return self._failure_response

    def __str__(self) -> str:
        """Return string representation."""
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        """Return detailed representation."""
        return (
            f"ServiceError(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"retryable={self.retryable}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses.

        Returns:
            Dictionary with error details (excludes debug info).
        """
        return {
            "code": self.code,
            "message": self.message_safe,
            "debug_id": self.debug_id,
        }
