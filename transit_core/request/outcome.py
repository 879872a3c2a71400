"""
Outcomes reported by a transport after executing a request.

A transport answers every request with exactly one of
NetworkServiceSuccess (a 2xx response) or NetworkServiceFailure (a non-2xx
response, or no response at all). Failures keep whatever response was
available so error types can use it for diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union

from .vocabulary import HTTPResponse, StatusCategory


class ServiceErrorKind(str, Enum):
    """Why a request did not produce a successful response."""

    UNKNOWN = "unknown"
    NO_INTERNET_CONNECTION = "no_internet_connection"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    INVALID_STATUS_CODE = "invalid_status_code"

    @classmethod
    def for_status(cls, status: int) -> "ServiceErrorKind":
        """Classify a non-2xx status code."""
        category = StatusCategory.for_status(status)
        if category is StatusCategory.REDIRECTION:
            return cls.REDIRECTION
        if category is StatusCategory.CLIENT_ERROR:
            return cls.CLIENT_ERROR
        if category is StatusCategory.SERVER_ERROR:
            return cls.SERVER_ERROR
        return cls.INVALID_STATUS_CODE


_TRANSPORT_KINDS = frozenset(
    {
        ServiceErrorKind.UNKNOWN,
        ServiceErrorKind.NO_INTERNET_CONNECTION,
        ServiceErrorKind.TIMED_OUT,
        ServiceErrorKind.CANCELLED,
    }
)


@dataclass(frozen=True)
class NetworkServiceError:
    """Generic service-level failure: a transport problem or a bad status."""

    kind: ServiceErrorKind
    cause: BaseException | None = field(default=None, compare=False)

    @property
    def is_transport_failure(self) -> bool:
        """True when no response was obtainable."""
        return self.kind in _TRANSPORT_KINDS

    @property
    def is_cancellation(self) -> bool:
        return self.kind is ServiceErrorKind.CANCELLED


@dataclass(frozen=True)
class NetworkServiceSuccess:
    """A 2xx response."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        if StatusCategory.for_status(self.status) is not StatusCategory.SUCCESS:
            raise ValueError(f"NetworkServiceSuccess requires a 2xx status, got {self.status}")

    @property
    def response(self) -> HTTPResponse:
        return HTTPResponse(status=self.status, headers=self.headers, body=self.body)


@dataclass(frozen=True)
class NetworkServiceFailure:
    """A failed attempt, with the response when one was received."""

    error: NetworkServiceError
    response: HTTPResponse | None = None

    @property
    def status(self) -> int | None:
        return self.response.status if self.response is not None else None

    @classmethod
    def transport(
        cls, kind: ServiceErrorKind, cause: BaseException | None = None
    ) -> "NetworkServiceFailure":
        """Failure for an attempt that produced no response."""
        return cls(error=NetworkServiceError(kind=kind, cause=cause))


NetworkServiceResult = Union[NetworkServiceSuccess, NetworkServiceFailure]


def outcome_for_response(response: HTTPResponse) -> NetworkServiceResult:
    """Split a received response into success (2xx) or failure."""
    if response.status_category is StatusCategory.SUCCESS:
        return NetworkServiceSuccess(
            status=response.status, headers=response.headers, body=response.body
        )
    return NetworkServiceFailure(
        error=NetworkServiceError(kind=ServiceErrorKind.for_status(response.status)),
        response=response,
    )
