"""Unit tests for the Request descriptor and RequestDefaults."""

import dataclasses

import pytest

from tests.transit_core.fakes import RecordingError, User, ok, status_failure
from transit_core.errors import ServiceError
from transit_core.request.request import DEFAULT_TIMEOUT, Request, RequestDefaults
from transit_core.request.result import Success
from transit_core.request.transformers import EmptyResponse, empty_transformer
from transit_core.request.vocabulary import CachePolicy, HeaderKey, HeaderValue, Method

A = HeaderKey("A")
B = HeaderKey("B")


@pytest.fixture
def request_():
    """Create a minimal Request."""
    return Request(url="https://api.example.com/users/1", transformer=empty_transformer())


class TestRequestDefaults:
    """Tests for field defaults and validation."""

    def test_default_values(self, request_):
        """Should default to GET, no headers and an unbounded budget."""
        assert request_.method is Method.GET
        assert dict(request_.headers) == {}
        assert request_.body is None
        assert request_.cache_policy is CachePolicy.USE_PROTOCOL_CACHE_POLICY
        assert request_.timeout == DEFAULT_TIMEOUT
        assert request_.recovery_attempt_count == 0
        assert request_.max_recovery_attempts is None
        assert request_.error_type is ServiceError

    def test_accepts_method_string(self):
        """Method names should be coerced to Method."""
        request = Request(url="u", transformer=empty_transformer(), method="POST")

        assert request.method is Method.POST

    def test_is_immutable(self, request_):
        """Should refuse attribute assignment."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            request_.timeout = 1.0

    def test_negative_timeout_rejected(self):
        """Timeout must be non-negative."""
        with pytest.raises(ValueError):
            Request(url="u", transformer=empty_transformer(), timeout=-1)

    def test_attempt_count_above_max_rejected(self):
        """Attempt count may not exceed the budget."""
        with pytest.raises(ValueError):
            Request(
                url="u",
                transformer=empty_transformer(),
                recovery_attempt_count=3,
                max_recovery_attempts=2,
            )

    def test_error_type_without_capability_rejected(self):
        """Error type must be constructible from a service failure."""

        class PlainError(Exception):
            pass

        with pytest.raises(TypeError):
            Request(url="u", transformer=empty_transformer(), error_type=PlainError)

    def test_body_must_be_bytes(self):
        """Text bodies should be encoded by the caller."""
        with pytest.raises(TypeError):
            Request(url="u", transformer=empty_transformer(), body="text")


class TestHeaderOperations:
    """Tests for adding_headers / using_headers."""

    def test_adding_headers_new_value_wins(self, request_):
        """Colliding keys should take the new value and keep the rest."""
        request = request_.using_headers({A: HeaderValue("0"), B: HeaderValue("2")})

        merged = request.adding_headers({A: HeaderValue("1")})

        assert dict(merged.headers) == {A: HeaderValue("1"), B: HeaderValue("2")}
        assert dict(request.headers) == {A: HeaderValue("0"), B: HeaderValue("2")}

    def test_adding_empty_headers_is_noop(self, request_):
        """Adding nothing should yield an equal descriptor."""
        request = request_.using_headers({A: HeaderValue("0")})

        assert request.adding_headers({}) == request

    def test_using_headers_replaces(self, request_):
        """using_headers should replace the whole set."""
        request = request_.using_headers({A: HeaderValue("0")}).using_headers({B: HeaderValue("2")})

        assert dict(request.headers) == {B: HeaderValue("2")}

    def test_using_none_headers_clears(self, request_):
        """None should clear all headers."""
        request = request_.using_headers({A: HeaderValue("0")}).using_headers(None)

        assert dict(request.headers) == {}

    def test_caller_dict_is_copied(self, request_):
        """Mutating the caller's dict should not leak into the request."""
        headers = {A: HeaderValue("0")}
        request = request_.using_headers(headers)

        headers[B] = HeaderValue("2")

        assert B not in request.headers

    def test_raw_headers(self, request_):
        """Should expose plain strings for the transport."""
        request = request_.adding_headers({HeaderKey.ACCEPT: HeaderValue.APPLICATION_JSON})

        assert request.raw_headers == {"Accept": "application/json"}


class TestBodyAndCopies:
    """Tests for using_body and other copies."""

    def test_using_body_is_idempotent(self, request_):
        """Applying the same body twice equals applying it once."""
        once = request_.using_body(b"payload")
        twice = once.using_body(b"payload")

        assert once == twice
        assert request_.body is None

    def test_using_timeout(self, request_):
        """Should copy with a new timeout."""
        assert request_.using_timeout(5).timeout == 5

    def test_copies_keep_transformer(self, request_):
        """Copies should share the transformer."""
        assert request_.using_body(b"x").transformer is request_.transformer

    def test_hashable_value(self, request_):
        """Equal descriptors should hash equally and work as set members."""
        headers = {HeaderKey.ACCEPT: HeaderValue.APPLICATION_JSON}
        first = request_.using_headers(headers)
        second = request_.using_headers(dict(headers))

        assert hash(first) == hash(second)
        assert len({first, second, request_}) == 2


class TestRecoveryBookkeeping:
    """Tests for attempt counting."""

    def test_unbounded_can_always_recover(self, request_):
        """No budget means recovery is always allowed."""
        request = request_
        for _ in range(10):
            request = request.updated_for_next_attempt()

        assert request.recovery_attempt_count == 10
        assert request.can_attempt_recovery

    def test_budget_is_respected(self, request_):
        """Recovery should stop once count reaches the budget."""
        request = request_.using_max_recovery_attempts(2)

        assert request.can_attempt_recovery
        request = request.updated_for_next_attempt()
        assert request.can_attempt_recovery
        request = request.updated_for_next_attempt()
        assert not request.can_attempt_recovery

    def test_incrementing_past_budget_raises(self, request_):
        """The invariant should hold on copies too."""
        request = request_.using_max_recovery_attempts(0)

        with pytest.raises(ValueError):
            request.updated_for_next_attempt()

    def test_increment_returns_new_value(self, request_):
        """The original descriptor should keep its count."""
        request_.updated_for_next_attempt()

        assert request_.recovery_attempt_count == 0


class TestTransformation:
    """Tests for transform_success / make_failure_error."""

    def test_transform_success_uses_transformer(self, request_):
        """Should delegate to the attached transformer."""
        assert request_.transform_success(ok(b"junk")) == Success(EmptyResponse())

    def test_make_failure_error_uses_error_type(self):
        """Should build the configured error type."""
        request = Request(url="u", transformer=empty_transformer(), error_type=RecordingError)

        error = request.make_failure_error(status_failure(500))

        assert isinstance(error, RecordingError)
        assert error.source == "service"
        assert error.failure_response.status == 500


class TestRequestDefaultsInjection:
    """Tests for explicitly injected defaults."""

    def test_make_request_applies_defaults(self):
        """Defaults should flow into the descriptor."""
        defaults = RequestDefaults(
            cache_policy=CachePolicy.RELOAD_IGNORING_LOCAL_CACHE,
            timeout=5.0,
            max_recovery_attempts=3,
        )

        request = defaults.make_request("https://api.example.com", transformer=empty_transformer())

        assert request.cache_policy is CachePolicy.RELOAD_IGNORING_LOCAL_CACHE
        assert request.timeout == 5.0
        assert request.max_recovery_attempts == 3

    def test_overrides_win(self):
        """Explicit arguments should beat defaults."""
        request = RequestDefaults(timeout=5.0).make_request(
            "u", transformer=empty_transformer(), timeout=1.0, method=Method.DELETE
        )

        assert request.timeout == 1.0
        assert request.method is Method.DELETE

    def test_builds_transformer_from_response_type(self):
        """response_type should produce a decoding transformer."""
        request = RequestDefaults().make_request("u", response_type=User)

        assert request.transform_success(ok(b'{"id": 1, "name": "Ada"}')) == Success(
            User(id=1, name="Ada")
        )

    def test_requires_transformer_or_type(self):
        """Neither transformer nor response_type is an error."""
        with pytest.raises(TypeError):
            RequestDefaults().make_request("u")

    def test_instances_are_independent(self):
        """Two defaults should not interfere."""
        fast = RequestDefaults(timeout=1.0)
        slow = RequestDefaults(timeout=120.0)

        assert fast.make_request("u", transformer=empty_transformer()).timeout == 1.0
        assert slow.make_request("u", transformer=empty_transformer()).timeout == 120.0
        assert RequestDefaults().timeout == DEFAULT_TIMEOUT

    def test_defaults_are_frozen(self):
        """Defaults should be immutable."""
        defaults = RequestDefaults()
        with pytest.raises(Exception):
            defaults.timeout = 1.0

    def test_negative_timeout_rejected(self):
        """Validation should reject a negative timeout."""
        with pytest.raises(Exception):
            RequestDefaults(timeout=-1)
