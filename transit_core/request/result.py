"""
Two-variant result type returned by decoders, transformers and the service.

Failures travel as values so a transformation stays a plain function from
outcome to result; nothing is thrown across that boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful result."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def map(self, func: Callable[[T], U]) -> "Success[U]":
        return Success(func(self.value))

    def map_failure(self, func: Callable[[Any], Any]) -> "Success[T]":
        return self

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """A failed result, containing the error."""

    error: E

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def map(self, func: Callable[[Any], Any]) -> "Failure[E]":
        return self

    def map_failure(self, func: Callable[[E], F]) -> "Failure[F]":
        return Failure(func(self.error))

    def unwrap(self) -> Any:
        """Raise the contained error, or wrap it when it is not an exception."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"unwrap() called on Failure({self.error!r})")


Result = Union[Success[T], Failure[E]]
