"""Unit tests for ServiceError."""

import pytest

from tests.transit_core.fakes import RecordingError, cancelled_failure, status_failure, timeout_failure
from transit_core.errors import ErrorCode, ServiceError
from transit_core.request.contracts import (
    DecodingFailureInitializable,
    NetworkServiceFailureInitializable,
    supports_decoding_failure,
    supports_service_failure,
)
from transit_core.request.decoding import DecodingError
from transit_core.request.outcome import ServiceErrorKind
from transit_core.request.request import Request
from transit_core.request.transformers import empty_transformer
from transit_core.runtime.recovery import RetryFailedRequests


class TestServiceError:
    """Tests for ServiceError base behavior."""

    def test_create_with_required_fields(self):
        """Should create error with required fields."""
        error = ServiceError(code="TEST_ERROR", message_safe="Something went wrong")

        assert error.code == "TEST_ERROR"
        assert error.message_safe == "Something went wrong"
        assert error.message_debug is None
        assert error.retryable is False
        assert error.cause is None
        assert error.debug_id is not None  # Auto-generated
        assert error.network_service_error is None
        assert error.failure_response is None

    def test_str_representation(self):
        """Should format as [CODE] message."""
        error = ServiceError(code="MY_CODE", message_safe="My message")

        assert str(error) == "[MY_CODE] My message"

    def test_is_exception(self):
        """Should be raiseable as an exception."""
        with pytest.raises(ServiceError) as exc_info:
            raise ServiceError(code="RAISE_TEST", message_safe="Can be raised")

        assert exc_info.value.code == "RAISE_TEST"

    def test_to_dict(self):
        """Should convert to API-safe dictionary."""
        error = ServiceError(
            code="DICT_TEST",
            message_safe="API message",
            message_debug="Debug only",
            debug_id="debug-123",
        )

        assert error.to_dict() == {
            "code": "DICT_TEST",
            "message": "API message",
            "debug_id": "debug-123",
        }


class TestFromServiceFailure:
    """Tests for the service-failure constructor."""

    @pytest.mark.parametrize(
        "status,code,retryable",
        [
            (401, ErrorCode.UNAUTHORIZED, False),
            (403, ErrorCode.FORBIDDEN, False),
            (404, ErrorCode.NOT_FOUND, False),
            (409, ErrorCode.CLIENT_ERROR, False),
            (429, ErrorCode.RATE_LIMITED, True),
            (500, ErrorCode.SERVER_ERROR, False),
            (502, ErrorCode.SERVER_ERROR, True),
            (503, ErrorCode.SERVICE_UNAVAILABLE, True),
            (302, ErrorCode.REDIRECTION, False),
        ],
    )
    def test_status_codes(self, status, code, retryable):
        """Status failures should map to error codes."""
        error = ServiceError.from_service_failure(status_failure(status))

        assert error.code == code
        assert error.retryable is retryable
        assert error.failure_response.status == status
        assert error.network_service_error.kind is ServiceErrorKind.for_status(status)

    def test_keeps_body_for_debugging(self):
        """The failure body should be kept in message_debug."""
        error = ServiceError.from_service_failure(status_failure(400, b"bad field"))

        assert error.message_debug == "bad field"
        assert error.failure_response.body == b"bad field"

    def test_timeout(self):
        """Transport timeouts should keep the cause."""
        failure = timeout_failure()

        error = ServiceError.from_service_failure(failure)

        assert error.code == ErrorCode.TIMEOUT
        assert error.retryable is True
        assert error.cause is failure.error.cause
        assert error.failure_response is None

    def test_cancelled(self):
        """Cancellation should not be retryable."""
        error = ServiceError.from_service_failure(cancelled_failure())

        assert error.code == ErrorCode.CANCELLED
        assert error.retryable is False

    @pytest.mark.parametrize(
        "failure",
        [status_failure(500), status_failure(502), status_failure(505), timeout_failure()],
        ids=["500", "502", "505", "timeout"],
    )
    def test_retryable_matches_default_strategy(self, failure):
        """retryable should agree with the stock retry strategy."""
        request = Request(url="u", transformer=empty_transformer(), max_recovery_attempts=3)

        error = ServiceError.from_service_failure(failure)

        assert error.retryable is RetryFailedRequests().can_attempt_recovery(error, request)


class TestFromDecodingFailure:
    """Tests for the decoding-failure constructor."""

    def test_keeps_type_and_data(self):
        """Should retain the decoded type and raw bytes."""
        decoding_error = DecodingError("missing field", target=dict)

        error = ServiceError.from_decoding_failure(decoding_error, dict, b"{}")

        assert error.code == ErrorCode.DECODING_FAILED
        assert error.cause is decoding_error
        assert error.decoding is dict
        assert error.data == b"{}"
        assert error.message_debug == "missing field"
        assert "dict" in error.message_safe


class TestContracts:
    """Tests for the capability contracts."""

    def test_service_error_supports_both(self):
        """ServiceError should satisfy both contracts."""
        assert supports_service_failure(ServiceError)
        assert supports_decoding_failure(ServiceError)
        error = ServiceError(code="X", message_safe="x")
        assert isinstance(error, NetworkServiceFailureInitializable)
        assert isinstance(error, DecodingFailureInitializable)

    def test_caller_error_without_base_class(self):
        """A caller type should qualify without inheriting anything of ours."""
        assert supports_service_failure(RecordingError)
        assert supports_decoding_failure(RecordingError)

    def test_plain_exception_lacks_capability(self):
        """A plain exception should not qualify."""
        assert not supports_service_failure(ValueError)
        assert not supports_decoding_failure(ValueError)
