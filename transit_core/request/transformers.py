"""
Builders for request transformers.

A transformer turns a NetworkServiceSuccess into Result[ResponseType,
ErrorType]. Three shapes are provided: direct decode of the body, decode
through an envelope (container) type, and the empty-response shortcut.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, TypeVar

from transit_core.errors import ServiceError

from .contracts import supports_decoding_failure
from .decoding import Decoder, DecodingError, JSONDecoder, decode_container
from .outcome import NetworkServiceSuccess
from .result import Failure, Result, Success

T = TypeVar("T")
E = TypeVar("E")

RequestTransformBlock = Callable[[NetworkServiceSuccess], Result[Any, Any]]
DecodingErrorTransformer = Callable[[DecodingError, type, bytes], Any]


class EmptyResponse:
    """Marker for responses whose body is irrelevant.

    Useful for DELETE requests, where a 200 with an empty body is typical.
    """

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EmptyResponse)

    def __hash__(self) -> int:
        return hash(EmptyResponse)

    def __repr__(self) -> str:
        return "EmptyResponse()"


def empty_transformer() -> RequestTransformBlock:
    """Transformer that succeeds with EmptyResponse whatever the body holds."""

    def transform(success: NetworkServiceSuccess) -> Result[EmptyResponse, Any]:
        return Success(EmptyResponse())

    return transform


def _is_empty_response(response_type: Any) -> bool:
    return isinstance(response_type, type) and issubclass(response_type, EmptyResponse)


def _catch_transformer_for(error_type: type) -> DecodingErrorTransformer:
    if not supports_decoding_failure(error_type):
        raise TypeError(
            f"{error_type.__name__} cannot be built from a decoding failure; "
            "implement from_decoding_failure or pass catch_transformer"
        )
    return error_type.from_decoding_failure


def _exposes_element(container_type: Any) -> bool:
    if hasattr(container_type, "element"):
        return True
    if "element" in getattr(container_type, "model_fields", {}):
        return True
    return dataclasses.is_dataclass(container_type) and any(
        f.name == "element" for f in dataclasses.fields(container_type)
    )


def success_transformer(
    response_type: type[T],
    error_type: type[E] = ServiceError,
    decoder: Decoder | None = None,
    catch_transformer: DecodingErrorTransformer | None = None,
) -> RequestTransformBlock:
    """Transformer that decodes the body directly into ``response_type``.

    Args:
        response_type: Type to decode the body into. EmptyResponse skips decoding.
        error_type: Error type built on decode failure via from_decoding_failure.
        decoder: Decoder to use. Defaults to JSONDecoder().
        catch_transformer: Overrides how a decode failure becomes an error;
            called with (decoding_error, response_type, data).

    Returns:
        A function from NetworkServiceSuccess to Result.
    """
    if _is_empty_response(response_type):
        return empty_transformer()

    active_decoder = decoder or JSONDecoder()
    on_failure = catch_transformer or _catch_transformer_for(error_type)

    def transform(success: NetworkServiceSuccess) -> Result[T, E]:
        data = success.body
        decoded = active_decoder.decode(data, response_type)
        if isinstance(decoded, Failure):
            return Failure(on_failure(decoded.error, response_type, data))
        return decoded

    return transform


def container_transformer(
    container_type: type,
    error_type: type[E] = ServiceError,
    decoder: Decoder | None = None,
    catch_transformer: DecodingErrorTransformer | None = None,
) -> RequestTransformBlock:
    """Transformer that decodes an envelope and returns its ``element``.

    A decode failure reports ``container_type`` as the type being decoded,
    since the envelope is the schema layer that failed.
    """
    if not _exposes_element(container_type):
        raise TypeError(
            f"{getattr(container_type, '__name__', container_type)!s} has no 'element'; "
            "container types must expose their payload as element"
        )
    active_decoder = decoder or JSONDecoder()
    on_failure = catch_transformer or _catch_transformer_for(error_type)

    def transform(success: NetworkServiceSuccess) -> Result[Any, E]:
        data = success.body
        decoded = decode_container(active_decoder, data, container_type)
        if isinstance(decoded, Failure):
            return Failure(on_failure(decoded.error, container_type, data))
        return decoded

    return transform
