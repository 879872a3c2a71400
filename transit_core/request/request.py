"""
Request descriptor.

A Request fully describes one attempt: what is sent (method, URL, headers,
body, cache policy, timeout), how a successful outcome is turned into a
typed result (the transformer), which error type failures become, and the
recovery bookkeeping carried from attempt to attempt.

Requests are immutable. Every "using"/"adding" method returns a new value,
so a descriptor handed to a transport is never changed afterwards.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, Field

from transit_core.errors import ServiceError

from .contracts import supports_service_failure
from .outcome import NetworkServiceFailure, NetworkServiceSuccess
from .result import Result
from .transformers import RequestTransformBlock, success_transformer
from .vocabulary import CachePolicy, HeaderKey, Headers, HeaderValue, Method, freeze_headers

ResponseType = TypeVar("ResponseType")
ErrorType = TypeVar("ErrorType")

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, kw_only=True)
class Request(Generic[ResponseType, ErrorType]):
    """Everything needed to execute and interpret one HTTP request.

    Attributes:
        url: Target URL. Validated by the caller.
        transformer: Turns a successful outcome into Result[ResponseType, ErrorType].
        method: HTTP method.
        headers: Header fields, read-only. Never None.
        body: Raw payload, if any.
        cache_policy: Cache directive passed to the transport.
        timeout: Seconds before the attempt times out.
        recovery_attempt_count: Recovery attempts made so far.
        max_recovery_attempts: Recovery budget; None means unbounded.
        error_type: Error type built from failed attempts.
    """

    url: str
    transformer: RequestTransformBlock
    method: Method = Method.GET
    headers: Headers = field(default_factory=dict)
    body: bytes | None = None
    cache_policy: CachePolicy = CachePolicy.USE_PROTOCOL_CACHE_POLICY
    timeout: float = DEFAULT_TIMEOUT
    recovery_attempt_count: int = 0
    max_recovery_attempts: int | None = None
    error_type: type = ServiceError

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", Method(self.method))
        object.__setattr__(self, "cache_policy", CachePolicy(self.cache_policy))
        object.__setattr__(self, "headers", freeze_headers(self.headers))

        if self.body is not None and not isinstance(self.body, bytes):
            raise TypeError(f"body must be bytes or None, got {type(self.body).__name__}")
        if not callable(self.transformer):
            raise TypeError("transformer must be callable")
        if not supports_service_failure(self.error_type):
            raise TypeError(
                f"{getattr(self.error_type, '__name__', self.error_type)} cannot be built "
                "from a service failure; implement from_service_failure"
            )
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.recovery_attempt_count < 0:
            raise ValueError("recovery_attempt_count must be >= 0")
        if self.max_recovery_attempts is not None:
            if self.max_recovery_attempts < 0:
                raise ValueError("max_recovery_attempts must be >= 0")
            if self.recovery_attempt_count > self.max_recovery_attempts:
                raise ValueError(
                    f"recovery_attempt_count ({self.recovery_attempt_count}) exceeds "
                    f"max_recovery_attempts ({self.max_recovery_attempts})"
                )

    # Derived copies

    def adding_headers(self, additional_headers: Mapping[HeaderKey, HeaderValue]) -> "Request":
        """Return a copy with ``additional_headers`` merged in.

        On a key collision the value from ``additional_headers`` wins.
        """
        if not additional_headers:
            return self
        return self.using_headers({**self.headers, **additional_headers})

    def using_headers(self, headers: Mapping[HeaderKey, HeaderValue] | None) -> "Request":
        """Return a copy whose headers are exactly ``headers``."""
        return dataclasses.replace(self, headers=headers)

    def using_body(self, body: bytes | None) -> "Request":
        """Return a copy with the given body."""
        return dataclasses.replace(self, body=body)

    def using_timeout(self, timeout: float) -> "Request":
        return dataclasses.replace(self, timeout=timeout)

    def using_max_recovery_attempts(self, max_recovery_attempts: int | None) -> "Request":
        return dataclasses.replace(self, max_recovery_attempts=max_recovery_attempts)

    def updated_for_next_attempt(self) -> "Request":
        """Return a copy with the recovery attempt count incremented.

        Raises:
            ValueError: If the recovery budget is already spent.
        """
        return dataclasses.replace(self, recovery_attempt_count=self.recovery_attempt_count + 1)

    # Recovery bookkeeping

    @property
    def can_attempt_recovery(self) -> bool:
        """Whether another recovery attempt fits in the budget."""
        if self.max_recovery_attempts is None:
            return True
        return self.recovery_attempt_count + 1 <= self.max_recovery_attempts

    # Transport and transformation

    @property
    def raw_headers(self) -> dict[str, str]:
        return {key.raw_value: value.raw_value for key, value in self.headers.items()}

    def transform_success(self, success: NetworkServiceSuccess) -> Result[ResponseType, ErrorType]:
        return self.transformer(success)

    def make_failure_error(self, failure: NetworkServiceFailure) -> ErrorType:
        return self.error_type.from_service_failure(failure)

    def __hash__(self) -> int:
        return hash(
            (
                self.url,
                self.transformer,
                self.method,
                frozenset(self.headers.items()),
                self.body,
                self.cache_policy,
                self.timeout,
                self.recovery_attempt_count,
                self.max_recovery_attempts,
                self.error_type,
            )
        )

    def __repr__(self) -> str:
        return (
            f"Request(method={self.method.value}, url={self.url!r}, "
            f"attempt={self.recovery_attempt_count}, "
            f"max_recovery_attempts={self.max_recovery_attempts})"
        )


class RequestDefaults(BaseModel):
    """Defaults applied when building requests.

    Pass an instance wherever requests are created instead of relying on
    process-wide state; two instances never affect each other.

    Attributes:
        cache_policy: Default cache directive.
        timeout: Default timeout in seconds.
        max_recovery_attempts: Default recovery budget (None = unbounded).
    """

    cache_policy: CachePolicy = CachePolicy.USE_PROTOCOL_CACHE_POLICY
    timeout: float = Field(default=DEFAULT_TIMEOUT, ge=0)
    max_recovery_attempts: int | None = Field(default=None, ge=0)

    model_config = {"frozen": True}

    def make_request(
        self,
        url: str,
        transformer: RequestTransformBlock | None = None,
        response_type: Any = None,
        **overrides: Any,
    ) -> Request:
        """Build a Request using these defaults.

        Args:
            url: Target URL.
            transformer: Transformer to attach. Built from ``response_type``
                with success_transformer when omitted.
            response_type: Type to decode successful bodies into.
            **overrides: Any other Request field; wins over the defaults.

        Returns:
            A new Request.
        """
        if transformer is None:
            if response_type is None:
                raise TypeError("make_request() needs a transformer or a response_type")
            transformer = success_transformer(
                response_type, overrides.get("error_type", ServiceError)
            )

        values: dict[str, Any] = {
            "cache_policy": self.cache_policy,
            "timeout": self.timeout,
            "max_recovery_attempts": self.max_recovery_attempts,
        }
        values.update(overrides)
        return Request(url=url, transformer=transformer, **values)
