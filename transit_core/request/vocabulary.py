"""
HTTP vocabulary shared by requests, outcomes and transports.

Methods and cache policies are closed enumerations. Header keys and values
are distinct wrapper types so a call site cannot pass one where the other
is expected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Mapping


class Method(str, Enum):
    """HTTP request methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"


class CachePolicy(str, Enum):
    """Cache directive attached to a request.

    The policy is passed through to the transport untouched; the library
    keeps no cache of its own.
    """

    USE_PROTOCOL_CACHE_POLICY = "use_protocol_cache_policy"
    RELOAD_IGNORING_LOCAL_CACHE = "reload_ignoring_local_cache"
    RETURN_CACHE_DATA_ELSE_LOAD = "return_cache_data_else_load"
    RETURN_CACHE_DATA_DONT_LOAD = "return_cache_data_dont_load"

    @property
    def cache_control(self) -> str | None:
        """Cache-Control directive equivalent, or None for the protocol default."""
        return _CACHE_CONTROL[self]


_CACHE_CONTROL: dict[CachePolicy, str | None] = {
    CachePolicy.USE_PROTOCOL_CACHE_POLICY: None,
    CachePolicy.RELOAD_IGNORING_LOCAL_CACHE: "no-cache",
    CachePolicy.RETURN_CACHE_DATA_ELSE_LOAD: "max-stale",
    CachePolicy.RETURN_CACHE_DATA_DONT_LOAD: "only-if-cached",
}


class StatusCategory(str, Enum):
    """Coarse classification of an HTTP status code."""

    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    INVALID = "invalid"

    @classmethod
    def for_status(cls, status: int) -> "StatusCategory":
        if 100 <= status < 200:
            return cls.INFORMATIONAL
        if 200 <= status < 300:
            return cls.SUCCESS
        if 300 <= status < 400:
            return cls.REDIRECTION
        if 400 <= status < 500:
            return cls.CLIENT_ERROR
        if 500 <= status < 600:
            return cls.SERVER_ERROR
        return cls.INVALID


@dataclass(frozen=True)
class HeaderKey:
    """Name of an HTTP header field."""

    raw_value: str

    ACCEPT: ClassVar[HeaderKey]
    ACCEPT_ENCODING: ClassVar[HeaderKey]
    ACCEPT_LANGUAGE: ClassVar[HeaderKey]
    AUTHORIZATION: ClassVar[HeaderKey]
    CACHE_CONTROL: ClassVar[HeaderKey]
    CONTENT_LENGTH: ClassVar[HeaderKey]
    CONTENT_TYPE: ClassVar[HeaderKey]
    USER_AGENT: ClassVar[HeaderKey]

    def __post_init__(self) -> None:
        if not isinstance(self.raw_value, str):
            raise TypeError(f"HeaderKey expects str, got {type(self.raw_value).__name__}")

    def __str__(self) -> str:
        return self.raw_value


@dataclass(frozen=True)
class HeaderValue:
    """Value of an HTTP header field."""

    raw_value: str

    APPLICATION_JSON: ClassVar[HeaderValue]
    APPLICATION_FORM_URLENCODED: ClassVar[HeaderValue]
    TEXT_PLAIN: ClassVar[HeaderValue]
    GZIP: ClassVar[HeaderValue]

    def __post_init__(self) -> None:
        if not isinstance(self.raw_value, str):
            raise TypeError(f"HeaderValue expects str, got {type(self.raw_value).__name__}")

    def __str__(self) -> str:
        return self.raw_value

    @classmethod
    def bearer(cls, token: str) -> HeaderValue:
        """Authorization value for a bearer token."""
        return cls(f"Bearer {token}")


HeaderKey.ACCEPT = HeaderKey("Accept")
HeaderKey.ACCEPT_ENCODING = HeaderKey("Accept-Encoding")
HeaderKey.ACCEPT_LANGUAGE = HeaderKey("Accept-Language")
HeaderKey.AUTHORIZATION = HeaderKey("Authorization")
HeaderKey.CACHE_CONTROL = HeaderKey("Cache-Control")
HeaderKey.CONTENT_LENGTH = HeaderKey("Content-Length")
HeaderKey.CONTENT_TYPE = HeaderKey("Content-Type")
HeaderKey.USER_AGENT = HeaderKey("User-Agent")

HeaderValue.APPLICATION_JSON = HeaderValue("application/json")
HeaderValue.APPLICATION_FORM_URLENCODED = HeaderValue("application/x-www-form-urlencoded")
HeaderValue.TEXT_PLAIN = HeaderValue("text/plain")
HeaderValue.GZIP = HeaderValue("gzip")


Headers = Mapping[HeaderKey, HeaderValue]


def freeze_headers(headers: Mapping[HeaderKey, HeaderValue] | None) -> Headers:
    """Return a read-only copy of ``headers`` (empty when None)."""
    if headers is None:
        return MappingProxyType({})
    for key, value in headers.items():
        if not isinstance(key, HeaderKey) or not isinstance(value, HeaderValue):
            raise TypeError(
                f"headers must map HeaderKey to HeaderValue, got {key!r}: {value!r}"
            )
    return MappingProxyType(dict(headers))


@dataclass(frozen=True)
class HTTPResponse:
    """Status, headers and body received from a server."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def status_category(self) -> StatusCategory:
        return StatusCategory.for_status(self.status)
