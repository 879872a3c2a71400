"""
Structural decoding of response bodies.

JSONDecoder validates raw bytes against a target type with pydantic. The
only recoverable failure is a structural one (pydantic.ValidationError,
which also covers malformed JSON); it comes back as Failure(DecodingError).
Anything else means the decoder itself is misconfigured and is raised as
DecoderContractViolation.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from .result import Failure, Result, Success

T = TypeVar("T")
C = TypeVar("C")


class DecodingError(Exception):
    """Body did not match the expected schema.

    Attributes:
        message: Summary of the mismatch.
        target: The type that was being decoded.
        errors: Per-location error details reported by the validator.
        cause: The underlying validation error, if any.
    """

    def __init__(
        self,
        message: str,
        target: Any = None,
        errors: list[dict[str, Any]] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.target = target
        self.errors = errors or []
        self.cause = cause

    @classmethod
    def from_validation_error(cls, exc: ValidationError, target: Any) -> "DecodingError":
        return cls(
            message=f"{exc.error_count()} validation error(s) decoding {_type_name(target)}",
            target=target,
            errors=exc.errors(include_url=False),
            cause=exc,
        )

    def __repr__(self) -> str:
        return f"DecodingError(target={_type_name(self.target)}, errors={len(self.errors)})"


class DecoderContractViolation(RuntimeError):
    """A decoder failed with something other than a structural error."""


@runtime_checkable
class Decoder(Protocol):
    """Decodes raw bytes into a target type."""

    def decode(self, data: bytes, target: type[T]) -> Result[T, DecodingError]:
        ...


@runtime_checkable
class DecodableContainer(Protocol):
    """Envelope type whose payload is exposed as ``element``.

    Example:
        class UserEnvelope(BaseModel):
            data: User
            meta: dict[str, Any] = {}

            @property
            def element(self) -> User:
                return self.data
    """

    @property
    def element(self) -> Any:
        ...


@lru_cache(maxsize=256)
def _adapter_for(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


class JSONDecoder:
    """Pydantic-backed JSON decoder.

    Args:
        strict: Disable pydantic's lax type coercion.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def decode(self, data: bytes, target: type[T]) -> Result[T, DecodingError]:
        try:
            value = _adapter_for(target).validate_json(data, strict=self.strict)
        except ValidationError as exc:
            return Failure(DecodingError.from_validation_error(exc, target))
        except Exception as exc:
            raise DecoderContractViolation(
                f"Decoder failed with a non-structural error while decoding "
                f"{_type_name(target)}: {exc!r}"
            ) from exc
        return Success(value)

    def __repr__(self) -> str:
        return f"JSONDecoder(strict={self.strict})"


def decode_container(
    decoder: Decoder, data: bytes, container_type: type[C]
) -> Result[Any, DecodingError]:
    """Decode an envelope and project its ``element`` out of it."""
    return decoder.decode(data, container_type).map(lambda container: container.element)
