# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Tests for the transport dispatcher and result reconciler."""

import base64
import hashlib
import hmac
import json

import httpx
import pytest

from usf_client import (
    DecodeError,
    DecodeFailure,
    Dispatcher,
    HttpFailure,
    NetworkError,
    NetworkFailure,
    RemoteError,
    SignatureGenerator,
    Success,
    reconcile,
)
from usf_client.transport import classify_response, parse_error_body

from conftest import TEST_BASE_URL


@pytest.fixture
def dispatcher(credentials, fake_api, fixed_clock) -> Dispatcher:
    signer = SignatureGenerator(credentials, clock=fixed_clock)
    return Dispatcher(signer, TEST_BASE_URL, transport=fake_api.transport)


class TestDispatchRequest:
    """Test the outgoing HTTP request."""

    @pytest.mark.asyncio
    async def test_single_post_with_headers(self, dispatcher, fake_api):
        """One POST to the base URL with JSON content type and sig header."""
        await dispatcher.dispatch(["find", {"x": 1}, {}])

        assert len(fake_api.requests) == 1
        request = fake_api.last_request
        assert request.method == "POST"
        assert str(request.url) == TEST_BASE_URL
        assert request.headers["content-type"] == "application/json"
        assert request.headers["sig"].startswith("auth_001.shared-secret.")

    @pytest.mark.asyncio
    async def test_body_is_canonical_array(self, dispatcher, fake_api):
        """The body is the compact JSON of the encoded array."""
        await dispatcher.dispatch(["find", {"x": 1}, {}])

        assert fake_api.last_request.content == b'["find",{"x":1},{}]'

    @pytest.mark.asyncio
    async def test_signature_verifies_against_transmitted_body(self, dispatcher, fake_api):
        """A server can recompute the HMAC from the bytes it received."""
        await dispatcher.dispatch(["create", None, {"color": {"name": "Añil"}}, {}])

        request = fake_api.last_request
        _, _, digest, b64_time = request.headers["sig"].split(".")
        time_ms = base64.b64decode(b64_time).decode("utf-8")
        expected = hmac.new(
            b"private-signing-key",
            request.content + time_ms.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

        assert digest == expected


class TestClassification:
    """Test outcome classification."""

    @pytest.mark.asyncio
    async def test_success(self, dispatcher, fake_api):
        fake_api.respond_json([{"id": "1"}])

        outcome = await dispatcher.dispatch(["find", {}, {}])

        assert outcome == Success(body=[{"id": "1"}])

    @pytest.mark.asyncio
    async def test_structured_error(self, dispatcher, fake_api):
        fake_api.respond_json({"error": {"message": "bad query", "code": "BAD_QUERY"}}, 400)

        outcome = await dispatcher.dispatch(["find", {}, {}])

        assert outcome == HttpFailure(
            status=400,
            error={"error": {"message": "bad query", "code": "BAD_QUERY"}},
        )

    @pytest.mark.asyncio
    async def test_unparsable_success(self, dispatcher, fake_api):
        fake_api.respond_text("<html>oops</html>", 200)

        outcome = await dispatcher.dispatch(["find", {}, {}])

        assert isinstance(outcome, DecodeFailure)
        assert outcome.message == "Failed to parse response"

    @pytest.mark.asyncio
    async def test_connection_failure(self, dispatcher, fake_api):
        fake_api.fail_connection()

        outcome = await dispatcher.dispatch(["find", {}, {}])

        assert isinstance(outcome, NetworkFailure)
        assert isinstance(outcome.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [200, 400])
    async def test_corrupt_content_encoding(self, dispatcher, fake_api, status_code):
        fake_api.respond_raw(b"not gzip at all", status_code, {"Content-Encoding": "gzip"})

        outcome = await dispatcher.dispatch(["find", {"x": 1}, {}])

        assert isinstance(outcome, DecodeFailure)
        assert isinstance(outcome.cause, httpx.DecodingError)

    @pytest.mark.asyncio
    async def test_redirect_loop_is_network_failure(self, dispatcher, fake_api):
        fake_api.error = httpx.TooManyRedirects("Exceeded maximum allowed redirects.")

        outcome = await dispatcher.dispatch(["find", {}, {}])

        assert isinstance(outcome, NetworkFailure)
        assert outcome.message == "Exceeded maximum allowed redirects."

    def test_empty_success_body_is_decode_failure(self):
        response = httpx.Response(200, content=b"", request=httpx.Request("POST", TEST_BASE_URL))

        assert isinstance(classify_response(response), DecodeFailure)


class TestErrorBodies:
    """Test normalization of non-2xx bodies."""

    def test_structured(self):
        body = json.dumps({"error": {"message": "nope", "code": "FORBIDDEN", "extra": 1}})

        assert parse_error_body(body) == {"error": {"message": "nope", "code": "FORBIDDEN"}}

    def test_raw_text(self):
        assert parse_error_body("Bad Gateway") == {
            "error": {"message": "Bad Gateway", "code": "PARSE_ERROR"}
        }

    def test_json_without_error_shape(self):
        assert parse_error_body('{"detail": "x"}') == {
            "error": {"message": '{"detail": "x"}', "code": "PARSE_ERROR"}
        }

    def test_empty(self):
        assert parse_error_body("") == {
            "error": {"message": "Failed to fetch", "code": "NETWORK_ERROR"}
        }

    def test_numeric_code(self):
        assert parse_error_body('{"error": {"message": "m", "code": 42}}') == {
            "error": {"message": "m", "code": "42"}
        }


class TestReconcile:
    """Test the silent/throwing policy."""

    ERROR = {"error": {"message": "bad query", "code": "BAD_QUERY"}}

    def test_success_returns_body(self):
        assert reconcile(Success(body={"deletedCount": 1}), silent_return=False) == {"deletedCount": 1}

    def test_remote_error_silent(self):
        assert reconcile(HttpFailure(400, self.ERROR), silent_return=True) == self.ERROR

    def test_remote_error_raised(self):
        with pytest.raises(RemoteError) as exc_info:
            reconcile(HttpFailure(400, self.ERROR), silent_return=False)

        assert str(exc_info.value) == "bad query"
        assert exc_info.value.code == "BAD_QUERY"
        assert exc_info.value.status == 400
        assert exc_info.value.to_dict() == self.ERROR

    @pytest.mark.parametrize("silent_return", [True, False])
    def test_network_failure_always_raised(self, silent_return):
        cause = httpx.ConnectError("refused")

        with pytest.raises(NetworkError) as exc_info:
            reconcile(NetworkFailure("refused", cause), silent_return=silent_return)

        assert exc_info.value.__cause__ is cause

    @pytest.mark.parametrize("silent_return", [True, False])
    def test_decode_failure_always_raised(self, silent_return):
        with pytest.raises(DecodeError, match="Failed to parse response"):
            reconcile(DecodeFailure(), silent_return=silent_return)
