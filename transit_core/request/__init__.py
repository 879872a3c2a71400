"""
Request layer for transit-http.

This package describes requests and interprets their outcomes:
- Request / RequestDefaults: Immutable request descriptor and injected defaults
- Method, CachePolicy, HeaderKey, HeaderValue: HTTP vocabulary
- NetworkServiceSuccess / NetworkServiceFailure: Transport outcomes
- success_transformer / container_transformer: Decoding strategies
- Success / Failure: Explicit results
"""

from .contracts import DecodingFailureInitializable, NetworkServiceFailureInitializable
from .decoding import (
    DecodableContainer,
    Decoder,
    DecoderContractViolation,
    DecodingError,
    JSONDecoder,
    decode_container,
)
from .outcome import (
    NetworkServiceError,
    NetworkServiceFailure,
    NetworkServiceResult,
    NetworkServiceSuccess,
    ServiceErrorKind,
    outcome_for_response,
)
from .request import DEFAULT_TIMEOUT, Request, RequestDefaults
from .result import Failure, Result, Success
from .transformers import (
    EmptyResponse,
    RequestTransformBlock,
    container_transformer,
    empty_transformer,
    success_transformer,
)
from .vocabulary import CachePolicy, HeaderKey, HeaderValue, HTTPResponse, Method, StatusCategory

__all__ = [
    "CachePolicy",
    "DEFAULT_TIMEOUT",
    "DecodableContainer",
    "Decoder",
    "DecoderContractViolation",
    "DecodingError",
    "DecodingFailureInitializable",
    "EmptyResponse",
    "Failure",
    "HTTPResponse",
    "HeaderKey",
    "HeaderValue",
    "JSONDecoder",
    "Method",
    "NetworkServiceError",
    "NetworkServiceFailure",
    "NetworkServiceFailureInitializable",
    "NetworkServiceResult",
    "NetworkServiceSuccess",
    "Request",
    "RequestDefaults",
    "RequestTransformBlock",
    "Result",
    "ServiceErrorKind",
    "StatusCategory",
    "Success",
    "container_transformer",
    "decode_container",
    "empty_transformer",
    "outcome_for_response",
    "success_transformer",
]
