"""
Capability contracts for caller-defined error types.

Any error representation can take part in the pipeline by providing the
constructors below; no base class is required. ServiceError in
transit_core.errors implements both.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .decoding import DecodingError
    from .outcome import NetworkServiceError, NetworkServiceFailure
    from .vocabulary import HTTPResponse


@runtime_checkable
class NetworkServiceFailureInitializable(Protocol):
    """Error type that can be built from a transport or status failure."""

    @classmethod
    def from_service_failure(
        cls, failure: "NetworkServiceFailure"
    ) -> "NetworkServiceFailureInitializable":
        """Build an error from a failed attempt."""
        ...

    @property
    def network_service_error(self) -> "NetworkServiceError | None":
        """The service failure this error was built from, if any."""
        ...

    @property
    def failure_response(self) -> "HTTPResponse | None":
        """The response available when the attempt failed, if any."""
        ...


@runtime_checkable
class DecodingFailureInitializable(Protocol):
    """Error type that can be built from a structural decode failure."""

    @classmethod
    def from_decoding_failure(
        cls, error: "DecodingError", decoding: type, data: bytes
    ) -> "DecodingFailureInitializable":
        """Build an error from a decode failure, the decoded type and the raw bytes."""
        ...


def supports_service_failure(error_type: type) -> bool:
    """Check the service-failure capability on a class."""
    return callable(getattr(error_type, "from_service_failure", None))


def supports_decoding_failure(error_type: type) -> bool:
    """Check the decoding-failure capability on a class."""
    return callable(getattr(error_type, "from_decoding_failure", None))
