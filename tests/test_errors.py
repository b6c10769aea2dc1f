"""Tests for the genwire error hierarchy."""

from __future__ import annotations

import pytest

from genwire.errors import (
    APIError,
    ClientError,
    DecodeError,
    EmptyModelError,
    GenAIError,
    LiveSessionError,
    ServerError,
    StreamDecodeError,
    TranscodingError,
    UnsupportedFieldError,
)


class TestTranscodingErrors:
    def test_unsupported_field_message(self) -> None:
        err = UnsupportedFieldError("video_metadata", "Google AI")
        assert str(err) == "video_metadata parameter is not supported in Google AI"
        assert err.field == "video_metadata"
        assert err.backend == "Google AI"
        assert isinstance(err, TranscodingError)

    def test_empty_model(self) -> None:
        err = EmptyModelError()
        assert str(err) == "model is empty"
        assert isinstance(err, TranscodingError)

    def test_hierarchy(self) -> None:
        for cls in (TranscodingError, DecodeError, LiveSessionError, APIError):
            assert issubclass(cls, GenAIError)
        assert issubclass(StreamDecodeError, DecodeError)


class TestDecodeError:
    def test_keeps_payload_text(self) -> None:
        err = DecodeError("invalid stream chunk", b"event: ping")
        assert err.payload == "event: ping"
        assert str(err) == "invalid stream chunk\nevent: ping"

    def test_without_payload(self) -> None:
        err = DecodeError("bad")
        assert err.payload == ""
        assert str(err) == "bad"


class TestLiveSessionError:
    def test_with_frame(self) -> None:
        err = LiveSessionError("received error in response", '{"error": {}}')
        assert str(err) == 'received error in response: {"error": {}}'
        assert err.frame == '{"error": {}}'

    def test_without_frame(self) -> None:
        assert str(LiveSessionError("session is closed")) == "session is closed"


class TestAPIError:
    def test_client_error_from_payload(self) -> None:
        payload = {
            "error": {
                "code": 400,
                "message": "bad request",
                "status": "INVALID_ARGUMENT",
                "details": [{"reason": "x"}],
            }
        }
        err = APIError.from_payload(400, payload)
        assert isinstance(err, ClientError)
        assert err.code == 400
        assert err.message == "bad request"
        assert err.status == "INVALID_ARGUMENT"
        assert err.details == [{"reason": "x"}]
        assert str(err) == (
            "client error. Code: 400, Message: bad request, Status: INVALID_ARGUMENT, Details: [{'reason': 'x'}]"
        )

    @pytest.mark.parametrize("status_code", [500, 503, 302])
    def test_server_error_for_everything_else(self, status_code: int) -> None:
        err = APIError.from_payload(status_code, {"error": {"message": "boom"}})
        assert isinstance(err, ServerError)
        assert err.code == status_code
        assert err.message == "boom"
        assert str(err).startswith("server error. Code:")

    def test_missing_error_object_uses_reason(self) -> None:
        err = APIError.from_payload(404, None, "404 Not Found")
        assert isinstance(err, ClientError)
        assert err.code == 404
        assert err.status == "404 Not Found"
        assert err.message == ""
        assert err.details == []

    @pytest.mark.parametrize("code", ["INVALID", None, True, [400]])
    def test_unusable_code_falls_back_to_status_code(self, code: object) -> None:
        err = APIError.from_payload(400, {"error": {"code": code, "message": "bad"}})
        assert isinstance(err, ClientError)
        assert err.code == 400

    def test_numeric_string_code(self) -> None:
        err = APIError.from_payload(500, {"error": {"code": "429"}})
        assert err.code == 429

    def test_details_are_normalised_to_a_list_of_objects(self) -> None:
        assert APIError.from_payload(400, {"error": {"details": {"reason": "x"}}}).details == [{"reason": "x"}]
        assert APIError.from_payload(400, {"error": {"details": "x"}}).details == []
        assert APIError.from_payload(400, {"error": {"details": [{"reason": "x"}, "junk"]}}).details == [
            {"reason": "x"}
        ]

    def test_from_error_document_uses_embedded_code(self) -> None:
        err = APIError.from_error_document({"error": {"code": 400, "message": "bad", "status": "INVALID_ARGUMENT"}})
        assert isinstance(err, ClientError)
        assert err.code == 400
        assert err.status == "INVALID_ARGUMENT"

    def test_from_error_document_without_code_is_server_error(self) -> None:
        err = APIError.from_error_document({"error": {"message": "boom"}})
        assert isinstance(err, ServerError)
        assert err.code == 500
        assert err.message == "boom"
