"""Tests for the realtime message converters."""

import pytest

from genwire.config import Backend, ClientConfig
from genwire.errors import UnsupportedFieldError
from genwire.transcoding import BaseTranscoder, GeminiAPITranscoder, VertexAITranscoder
from genwire.transcoding.document import from_document, to_document
from genwire.types import (
    Blob,
    Content,
    FunctionResponse,
    GenerationConfig,
    GoogleSearch,
    LiveClientContent,
    LiveClientMessage,
    LiveClientRealtimeInput,
    LiveClientToolResponse,
    LiveConnectConfig,
    LiveServerMessage,
    Part,
    Tool,
)

GEMINI = GeminiAPITranscoder(ClientConfig(backend=Backend.GEMINI_API, api_key="test-key"))
VERTEX = VertexAITranscoder(ClientConfig(backend=Backend.VERTEX_AI, project="test-project", location="us-central1"))


def _send(transcoder: BaseTranscoder, message: LiveClientMessage) -> dict:
    body = transcoder.live_send_parameters_to_wire(to_document({"input": message}))
    body.pop("input", None)
    return body


class TestConnectParameters:
    def test_model_only(self) -> None:
        body = GEMINI.live_connect_parameters_to_wire({"model": "models/test-model"})
        assert body == {"setup": {"model": "models/test-model"}}

    def test_config_is_hoisted_into_setup(self) -> None:
        config = LiveConnectConfig(
            generation_config=GenerationConfig(temperature=0.5),
            response_modalities=["AUDIO"],
            system_instruction=Content.from_parts([Part.from_text("be brief")], role="user"),
            tools=[Tool(google_search=GoogleSearch())],
        )
        body = GEMINI.live_connect_parameters_to_wire(to_document({"model": "models/test-model", "config": config}))
        body.pop("config")
        assert body == {
            "setup": {
                "model": "models/test-model",
                "generationConfig": {"temperature": 0.5, "responseModalities": ["AUDIO"]},
                "systemInstruction": {"parts": [{"text": "be brief"}], "role": "user"},
                "tools": [{"googleSearch": {}}],
            }
        }

    def test_vertex_rejects_thought_in_system_instruction(self) -> None:
        config = LiveConnectConfig(system_instruction=Content.from_parts([Part(text="x", thought=True)]))
        with pytest.raises(UnsupportedFieldError, match="thought parameter is not supported in Vertex AI"):
            VERTEX.live_connect_parameters_to_wire(to_document({"model": "m", "config": config}))


class TestClientMessages:
    def test_client_content(self) -> None:
        message = LiveClientMessage(
            client_content=LiveClientContent(turns=[Content.from_text("hello")], turn_complete=True)
        )
        assert _send(GEMINI, message) == {
            "clientContent": {"turns": [{"parts": [{"text": "hello"}], "role": "user"}], "turnComplete": True}
        }

    def test_realtime_input_bytes_are_base64(self) -> None:
        message = LiveClientMessage(
            realtime_input=LiveClientRealtimeInput(media_chunks=[Blob(data=b"\x00\x01", mime_type="audio/pcm")])
        )
        assert _send(VERTEX, message) == {
            "realtimeInput": {"mediaChunks": [{"mimeType": "audio/pcm", "data": "AAE="}]}
        }

    def test_tool_response_keeps_id_on_gemini_api(self) -> None:
        message = LiveClientMessage(
            tool_response=LiveClientToolResponse(
                function_responses=[FunctionResponse(id="call-1", name="lookup", response={"ok": True})]
            )
        )
        assert _send(GEMINI, message) == {
            "toolResponse": {"functionResponses": [{"id": "call-1", "name": "lookup", "response": {"ok": True}}]}
        }

    def test_tool_response_id_rejected_on_vertex_ai(self) -> None:
        message = LiveClientMessage(
            tool_response=LiveClientToolResponse(function_responses=[FunctionResponse(id="call-1", name="lookup")])
        )
        with pytest.raises(UnsupportedFieldError, match="^id parameter is not supported in Vertex AI$"):
            _send(VERTEX, message)

    def test_empty_message(self) -> None:
        assert _send(GEMINI, LiveClientMessage()) == {}


class TestServerMessages:
    def test_setup_complete(self) -> None:
        converted = GEMINI.live_server_message_from_wire({"setupComplete": {}})
        message = from_document(LiveServerMessage, converted)
        assert message.setup_complete is not None
        assert message.server_content is None

    def test_server_content(self) -> None:
        raw = {
            "serverContent": {
                "modelTurn": {"parts": [{"text": "hi"}], "role": "model"},
                "turnComplete": True,
            }
        }
        message = from_document(LiveServerMessage, VERTEX.live_server_message_from_wire(raw))
        assert message.server_content is not None
        assert message.server_content.turn_complete is True
        assert message.server_content.model_turn is not None
        assert message.server_content.model_turn.model_dump() == Content.from_text("hi", role="model").model_dump()

    def test_tool_call_ids_per_backend(self) -> None:
        raw = {"toolCall": {"functionCalls": [{"id": "call-1", "name": "lookup", "args": {"q": "x"}}]}}
        assert GEMINI.live_server_message_from_wire(raw) == raw
        assert VERTEX.live_server_message_from_wire(raw) == {
            "toolCall": {"functionCalls": [{"name": "lookup", "args": {"q": "x"}}]}
        }

    def test_tool_call_cancellation(self) -> None:
        raw = {"toolCallCancellation": {"ids": ["call-1"]}}
        message = from_document(LiveServerMessage, GEMINI.live_server_message_from_wire(raw))
        assert message.tool_call_cancellation is not None
        assert message.tool_call_cancellation.ids == ["call-1"]

    def test_unknown_keys_are_dropped(self) -> None:
        assert GEMINI.live_server_message_from_wire({"usageMetadata": {"totalTokenCount": 3}}) == {}
