"""Per-entity converters shared by both backends.

Every converter reads the known fields of one entity from a generic
document, in the entity's declared field order, and writes them into a
fresh document. Some fields are written into ``parent_object`` instead
because the wire format hoists them out of their natural container.

The two backends differ only in static per-entity tables:

- ``unsupported_fields``: request fields the backend rejects. A non-empty
  value raises :class:`UnsupportedFieldError`; an empty one is ignored.
- ``ignored_fields``: response fields the backend's typed shape does not
  carry. They are dropped silently.

The first violation wins; no partial document is returned.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, ClassVar

from pydantic.alias_generators import to_snake

from genwire.config import Backend, ClientConfig
from genwire.errors import TranscodingError, UnsupportedFieldError
from genwire.transcoding import names
from genwire.transcoding.document import (
    Converter,
    Document,
    apply_converter_to_list,
    apply_transformer_to_list,
    get_value_by_path,
    is_empty,
    set_value_by_path,
)

PART_FIELDS = (
    "videoMetadata",
    "thought",
    "codeExecutionResult",
    "executableCode",
    "fileData",
    "functionCall",
    "functionResponse",
    "inlineData",
    "text",
)

SCHEMA_FIELDS = (
    "minItems",
    "example",
    "propertyOrdering",
    "pattern",
    "minimum",
    "default",
    "anyOf",
    "maxLength",
    "title",
    "minLength",
    "minProperties",
    "maxItems",
    "maximum",
    "nullable",
    "maxProperties",
    "type",
    "description",
    "enum",
    "format",
    "items",
    "properties",
    "required",
)

CANDIDATE_FIELDS = (
    "finishMessage",
    "tokenCount",
    "avgLogprobs",
    "finishReason",
    "groundingMetadata",
    "index",
    "logprobsResult",
    "safetyRatings",
)


class BaseTranscoder:
    """Converters for every request and response entity.

    Subclasses set :attr:`backend` and fill the field tables.
    """

    backend: ClassVar[Backend]
    unsupported_fields: ClassVar[dict[str, frozenset[str]]] = {}
    ignored_fields: ClassVar[dict[str, frozenset[str]]] = {}
    # Key under which a response carries CitationMetadata.citations.
    citations_field: ClassVar[str] = "citations"

    def __init__(self, config: ClientConfig) -> None:
        self.config = config

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def _take(self, entity: str, from_object: Document, field: str) -> Any:
        """Read a request field, enforcing the backend's rejection table."""
        value = get_value_by_path(from_object, [field])
        if value is None:
            return None
        if field in self.unsupported_fields.get(entity, ()):
            if is_empty(value):
                return None
            raise UnsupportedFieldError(to_snake(field), self.backend.label)
        return value

    def _keep(self, entity: str, from_object: Document, field: str) -> Any:
        """Read a response field, dropping the ones the backend ignores."""
        if field in self.ignored_fields.get(entity, ()):
            return None
        return get_value_by_path(from_object, [field])

    def _copy(self, entity: str, from_object: Document, to_object: Document, fields: Iterable[str]) -> None:
        for field in fields:
            set_value_by_path(to_object, [field], self._take(entity, from_object, field))

    def _copy_back(self, entity: str, from_object: Document, to_object: Document, fields: Iterable[str]) -> None:
        for field in fields:
            set_value_by_path(to_object, [field], self._keep(entity, from_object, field))

    @staticmethod
    def _nested(value: Any, converter: Converter, parent_object: Document | None) -> Document:
        if not isinstance(value, dict):
            msg = f"expected an object, got {type(value).__name__}"
            raise TranscodingError(msg)
        return converter(value, parent_object)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def part_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        self._copy("Part", from_object, to_object, PART_FIELDS)
        return to_object

    def content_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        parts = self._take("Content", from_object, "parts")
        if parts is not None:
            set_value_by_path(to_object, ["parts"], apply_converter_to_list(parts, self.part_to_wire))
        self._copy("Content", from_object, to_object, ("role",))
        return to_object

    # ------------------------------------------------------------------
    # Schema, safety and tools
    # ------------------------------------------------------------------

    def schema_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        self._copy("Schema", from_object, to_object, SCHEMA_FIELDS)
        return to_object

    def safety_setting_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        self._copy("SafetySetting", from_object, to_object, ("method", "category", "threshold"))
        return to_object

    def function_declaration_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        response = self._take("FunctionDeclaration", from_object, "response")
        if response is not None:
            set_value_by_path(to_object, ["response"], self._nested(response, self.schema_to_wire, to_object))
        self._copy("FunctionDeclaration", from_object, to_object, ("description", "name", "parameters"))
        return to_object

    def google_search_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        return {}

    def dynamic_retrieval_config_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        self._copy("DynamicRetrievalConfig", from_object, to_object, ("mode", "dynamicThreshold"))
        return to_object

    def google_search_retrieval_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        config = self._take("GoogleSearchRetrieval", from_object, "dynamicRetrievalConfig")
        if config is not None:
            set_value_by_path(
                to_object,
                ["dynamicRetrievalConfig"],
                self._nested(config, self.dynamic_retrieval_config_to_wire, to_object),
            )
        return to_object

    def tool_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        declarations = self._take("Tool", from_object, "functionDeclarations")
        if declarations is not None:
            set_value_by_path(
                to_object,
                ["functionDeclarations"],
                apply_converter_to_list(declarations, self.function_declaration_to_wire),
            )
        self._copy("Tool", from_object, to_object, ("retrieval",))

        search = self._take("Tool", from_object, "googleSearch")
        if search is not None:
            set_value_by_path(to_object, ["googleSearch"], self._nested(search, self.google_search_to_wire, to_object))

        retrieval = self._take("Tool", from_object, "googleSearchRetrieval")
        if retrieval is not None:
            set_value_by_path(
                to_object,
                ["googleSearchRetrieval"],
                self._nested(retrieval, self.google_search_retrieval_to_wire, to_object),
            )
        self._copy("Tool", from_object, to_object, ("codeExecution",))
        return to_object

    def function_calling_config_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        self._copy("FunctionCallingConfig", from_object, to_object, ("mode", "allowedFunctionNames"))
        return to_object

    def tool_config_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        config = self._take("ToolConfig", from_object, "functionCallingConfig")
        if config is not None:
            set_value_by_path(
                to_object,
                ["functionCallingConfig"],
                self._nested(config, self.function_calling_config_to_wire, to_object),
            )
        return to_object

    # ------------------------------------------------------------------
    # Speech
    # ------------------------------------------------------------------

    def prebuilt_voice_config_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        self._copy("PrebuiltVoiceConfig", from_object, to_object, ("voiceName",))
        return to_object

    def voice_config_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        prebuilt = self._take("VoiceConfig", from_object, "prebuiltVoiceConfig")
        if prebuilt is not None:
            set_value_by_path(
                to_object,
                ["prebuiltVoiceConfig"],
                self._nested(prebuilt, self.prebuilt_voice_config_to_wire, to_object),
            )
        return to_object

    def speech_config_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        voice = self._take("SpeechConfig", from_object, "voiceConfig")
        if voice is not None:
            set_value_by_path(to_object, ["voiceConfig"], self._nested(voice, self.voice_config_to_wire, to_object))
        return to_object

    # ------------------------------------------------------------------
    # Content generation
    # ------------------------------------------------------------------

    def generate_content_config_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        entity = "GenerateContentConfig"
        to_object: Document = {}

        instruction = self._take(entity, from_object, "systemInstruction")
        if instruction is not None:
            instruction = names.t_content(self.config, instruction)
            set_value_by_path(
                parent_object, ["systemInstruction"], self._nested(instruction, self.content_to_wire, to_object)
            )

        self._copy(
            entity,
            from_object,
            to_object,
            (
                "temperature",
                "topP",
                "topK",
                "candidateCount",
                "maxOutputTokens",
                "stopSequences",
                "responseLogprobs",
                "logprobs",
                "presencePenalty",
                "frequencyPenalty",
                "seed",
                "responseMimeType",
            ),
        )

        schema = self._take(entity, from_object, "responseSchema")
        if schema is not None:
            schema = names.t_schema(self.config, schema)
            set_value_by_path(to_object, ["responseSchema"], self._nested(schema, self.schema_to_wire, to_object))

        self._copy(entity, from_object, to_object, ("routingConfig",))

        safety = self._take(entity, from_object, "safetySettings")
        if safety is not None:
            set_value_by_path(
                parent_object, ["safetySettings"], apply_converter_to_list(safety, self.safety_setting_to_wire)
            )

        tools = self._take(entity, from_object, "tools")
        if tools is not None:
            tools = apply_transformer_to_list(tools, lambda tool: names.t_tool(self.config, tool))
            tools = names.t_tools(self.config, tools)
            set_value_by_path(parent_object, ["tools"], apply_converter_to_list(tools, self.tool_to_wire))

        tool_config = self._take(entity, from_object, "toolConfig")
        if tool_config is not None:
            set_value_by_path(
                parent_object, ["toolConfig"], self._nested(tool_config, self.tool_config_to_wire, to_object)
            )

        cached = self._take(entity, from_object, "cachedContent")
        if cached is not None:
            set_value_by_path(parent_object, ["cachedContent"], names.t_cached_content_name(self.config, cached))

        self._copy(entity, from_object, to_object, ("responseModalities", "mediaResolution"))

        speech = self._take(entity, from_object, "speechConfig")
        if speech is not None:
            speech = names.t_speech_config(self.config, speech)
            set_value_by_path(to_object, ["speechConfig"], self._nested(speech, self.speech_config_to_wire, to_object))
        return to_object

    def generate_content_parameters_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}

        model = get_value_by_path(from_object, ["model"])
        if model is not None:
            set_value_by_path(to_object, ["_url", "model"], names.t_model(self.config, model))

        contents = get_value_by_path(from_object, ["contents"])
        if contents is not None:
            contents = names.t_contents(self.config, contents)
            set_value_by_path(to_object, ["contents"], apply_converter_to_list(contents, self.content_to_wire))

        config = get_value_by_path(from_object, ["config"])
        if config is not None:
            set_value_by_path(
                to_object,
                ["generationConfig"],
                self._nested(config, self.generate_content_config_to_wire, to_object),
            )
        return to_object

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def part_from_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        self._copy_back("Part", from_object, to_object, PART_FIELDS)
        return to_object

    def content_from_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        parts = self._keep("Content", from_object, "parts")
        if parts is not None:
            set_value_by_path(to_object, ["parts"], apply_converter_to_list(parts, self.part_from_wire))
        self._copy_back("Content", from_object, to_object, ("role",))
        return to_object

    def citation_metadata_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        set_value_by_path(to_object, ["citations"], get_value_by_path(from_object, [self.citations_field]))
        return to_object

    def candidate_from_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        content = self._keep("Candidate", from_object, "content")
        if content is not None:
            set_value_by_path(to_object, ["content"], self._nested(content, self.content_from_wire, to_object))

        citations = self._keep("Candidate", from_object, "citationMetadata")
        if citations is not None:
            set_value_by_path(
                to_object,
                ["citationMetadata"],
                self._nested(citations, self.citation_metadata_from_wire, to_object),
            )
        self._copy_back("Candidate", from_object, to_object, CANDIDATE_FIELDS)
        return to_object

    def generate_content_response_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        candidates = get_value_by_path(from_object, ["candidates"])
        if candidates is not None:
            set_value_by_path(to_object, ["candidates"], apply_converter_to_list(candidates, self.candidate_from_wire))
        self._copy_back(
            "GenerateContentResponse",
            from_object,
            to_object,
            ("modelVersion", "promptFeedback", "usageMetadata"),
        )
        return to_object

    # ------------------------------------------------------------------
    # Realtime: client to server
    # ------------------------------------------------------------------

    def live_connect_config_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        entity = "LiveConnectConfig"
        to_object: Document = {}
        set_value_by_path(
            parent_object, ["setup", "generationConfig"], self._take(entity, from_object, "generationConfig")
        )
        set_value_by_path(
            parent_object,
            ["setup", "generationConfig", "responseModalities"],
            self._take(entity, from_object, "responseModalities"),
        )
        set_value_by_path(
            parent_object,
            ["setup", "generationConfig", "speechConfig"],
            self._take(entity, from_object, "speechConfig"),
        )

        instruction = self._take(entity, from_object, "systemInstruction")
        if instruction is not None:
            set_value_by_path(
                parent_object,
                ["setup", "systemInstruction"],
                self._nested(instruction, self.content_to_wire, to_object),
            )

        tools = self._take(entity, from_object, "tools")
        if tools is not None:
            set_value_by_path(parent_object, ["setup", "tools"], apply_converter_to_list(tools, self.tool_to_wire))
        return to_object

    def live_connect_parameters_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        set_value_by_path(to_object, ["setup", "model"], get_value_by_path(from_object, ["model"]))

        config = get_value_by_path(from_object, ["config"])
        if config is not None:
            set_value_by_path(
                to_object, ["config"], self._nested(config, self.live_connect_config_to_wire, to_object)
            )
        return to_object

    def live_client_setup_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        entity = "LiveClientSetup"
        to_object: Document = {}
        self._copy(entity, from_object, to_object, ("model", "generationConfig"))

        instruction = self._take(entity, from_object, "systemInstruction")
        if instruction is not None:
            set_value_by_path(
                to_object, ["systemInstruction"], self._nested(instruction, self.content_to_wire, to_object)
            )

        tools = self._take(entity, from_object, "tools")
        if tools is not None:
            set_value_by_path(to_object, ["tools"], apply_converter_to_list(tools, self.tool_to_wire))
        return to_object

    def live_client_content_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        turns = self._take("LiveClientContent", from_object, "turns")
        if turns is not None:
            set_value_by_path(to_object, ["turns"], apply_converter_to_list(turns, self.content_to_wire))
        self._copy("LiveClientContent", from_object, to_object, ("turnComplete",))
        return to_object

    def live_client_realtime_input_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        self._copy("LiveClientRealtimeInput", from_object, to_object, ("mediaChunks",))
        return to_object

    def function_response_to_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        self._copy("FunctionResponse", from_object, to_object, ("id", "name", "response"))
        return to_object

    def live_client_tool_response_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        responses = self._take("LiveClientToolResponse", from_object, "functionResponses")
        if responses is not None:
            set_value_by_path(
                to_object,
                ["functionResponses"],
                apply_converter_to_list(responses, self.function_response_to_wire),
            )
        return to_object

    def live_client_message_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        variants: tuple[tuple[str, Converter], ...] = (
            ("setup", self.live_client_setup_to_wire),
            ("clientContent", self.live_client_content_to_wire),
            ("realtimeInput", self.live_client_realtime_input_to_wire),
            ("toolResponse", self.live_client_tool_response_to_wire),
        )
        for field, converter in variants:
            value = self._take("LiveClientMessage", from_object, field)
            if value is not None:
                set_value_by_path(parent_object, [field], self._nested(value, converter, to_object))
        return to_object

    def live_send_parameters_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        message = get_value_by_path(from_object, ["input"])
        if message is not None:
            set_value_by_path(to_object, ["input"], self._nested(message, self.live_client_message_to_wire, to_object))
        return to_object

    # ------------------------------------------------------------------
    # Realtime: server to client
    # ------------------------------------------------------------------

    def live_server_setup_complete_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        return {}

    def live_server_content_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        turn = self._keep("LiveServerContent", from_object, "modelTurn")
        if turn is not None:
            set_value_by_path(to_object, ["modelTurn"], self._nested(turn, self.content_from_wire, to_object))
        self._copy_back("LiveServerContent", from_object, to_object, ("turnComplete", "interrupted"))
        return to_object

    def function_call_from_wire(self, from_object: Document, parent_object: Document | None = None) -> Document:
        to_object: Document = {}
        self._copy_back("FunctionCall", from_object, to_object, ("id", "args", "name"))
        return to_object

    def live_server_tool_call_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        calls = self._keep("LiveServerToolCall", from_object, "functionCalls")
        if calls is not None:
            set_value_by_path(
                to_object, ["functionCalls"], apply_converter_to_list(calls, self.function_call_from_wire)
            )
        return to_object

    def live_server_tool_call_cancellation_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        self._copy_back("LiveServerToolCallCancellation", from_object, to_object, ("ids",))
        return to_object

    def live_server_message_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        to_object: Document = {}
        variants: tuple[tuple[str, Converter], ...] = (
            ("setupComplete", self.live_server_setup_complete_from_wire),
            ("serverContent", self.live_server_content_from_wire),
            ("toolCall", self.live_server_tool_call_from_wire),
            ("toolCallCancellation", self.live_server_tool_call_cancellation_from_wire),
        )
        for field, converter in variants:
            value = self._keep("LiveServerMessage", from_object, field)
            if value is not None:
                set_value_by_path(to_object, [field], self._nested(value, converter, to_object))
        return to_object
