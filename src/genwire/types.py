"""Typed, backend-agnostic request and response models.

Attributes are snake_case in Python and camelCase on the wire. Every model
ignores unknown keys, so fields added by the backend later never break
response materialisation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ROLE_USER = "user"
ROLE_MODEL = "model"


class WireModel(BaseModel):
    """Base for every model that crosses the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )


# ---------------------------------------------------------------------------
# Parts: the closed set of content variants
# ---------------------------------------------------------------------------


class VideoMetadata(WireModel):
    """Offsets that clip a referenced video."""

    start_offset: str | None = None
    end_offset: str | None = None


class CodeExecutionResult(WireModel):
    """Result of running an ``ExecutableCode`` part."""

    outcome: str | None = None
    output: str | None = None


class ExecutableCode(WireModel):
    """Code generated by the model for the code-execution tool."""

    code: str | None = None
    language: str | None = None


class FileData(WireModel):
    """A reference to a file by URI."""

    file_uri: str | None = None
    mime_type: str | None = None


class FunctionCall(WireModel):
    """A function invocation predicted by the model."""

    id: str | None = None
    args: dict[str, Any] | None = None
    name: str | None = None


class FunctionResponse(WireModel):
    """The result of a ``FunctionCall``, sent back by the client."""

    id: str | None = None
    name: str | None = None
    response: dict[str, Any] | None = None


class Blob(WireModel):
    """Inline binary data. ``data`` is base64 on the wire."""

    mime_type: str | None = None
    data: bytes | None = None


_PART_VARIANTS: dict[str, str] = {
    "video_metadata": "VideoMetadata",
    "code_execution_result": "CodeExecutionResult",
    "executable_code": "ExecutableCode",
    "file_data": "FileData",
    "function_call": "FunctionCall",
    "function_response": "FunctionResponse",
    "inline_data": "InlineData",
}


class Part(WireModel):
    """One piece of a :class:`Content`.

    Exactly one variant is expected to be populated; the ``from_*``
    constructors guarantee it. ``thought`` flags text produced while the
    model was reasoning.
    """

    video_metadata: VideoMetadata | None = None
    thought: bool | None = None
    code_execution_result: CodeExecutionResult | None = None
    executable_code: ExecutableCode | None = None
    file_data: FileData | None = None
    function_call: FunctionCall | None = None
    function_response: FunctionResponse | None = None
    inline_data: Blob | None = None
    text: str | None = None

    @property
    def non_text_variant(self) -> str | None:
        """Name of the first populated non-text variant, if any."""
        for attr, name in _PART_VARIANTS.items():
            if getattr(self, attr) is not None:
                return name
        return None

    @classmethod
    def from_text(cls, text: str) -> Part:
        return cls(text=text)

    @classmethod
    def from_uri(cls, file_uri: str, mime_type: str) -> Part:
        return cls(file_data=FileData(file_uri=file_uri, mime_type=mime_type))

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> Part:
        return cls(inline_data=Blob(data=data, mime_type=mime_type))

    @classmethod
    def from_function_call(cls, name: str, args: dict[str, Any]) -> Part:
        return cls(function_call=FunctionCall(name=name, args=args))

    @classmethod
    def from_function_response(cls, name: str, response: dict[str, Any]) -> Part:
        return cls(function_response=FunctionResponse(name=name, response=response))

    @classmethod
    def from_executable_code(cls, code: str, language: str) -> Part:
        return cls(executable_code=ExecutableCode(code=code, language=language))

    @classmethod
    def from_code_execution_result(cls, outcome: str, output: str) -> Part:
        return cls(code_execution_result=CodeExecutionResult(outcome=outcome, output=output))

    @classmethod
    def from_video_metadata(cls, start_offset: str, end_offset: str) -> Part:
        return cls(video_metadata=VideoMetadata(start_offset=start_offset, end_offset=end_offset))


class Content(WireModel):
    """An ordered list of parts authored by one role."""

    parts: list[Part] | None = None
    role: str | None = None

    @classmethod
    def from_parts(cls, parts: list[Part], role: str = ROLE_USER) -> Content:
        return cls(parts=list(parts), role=role)

    @classmethod
    def from_text(cls, text: str, role: str = ROLE_USER) -> Content:
        return cls(parts=[Part.from_text(text)], role=role)


# ---------------------------------------------------------------------------
# Schema, safety and tools
# ---------------------------------------------------------------------------


class Schema(WireModel):
    """JSON-Schema-like descriptor for function parameters and structured output.

    Many constraint fields are only accepted by Vertex AI.
    """

    min_items: int | None = None
    example: Any = None
    property_ordering: list[str] | None = None
    pattern: str | None = None
    minimum: float | None = None
    default: Any = Field(default=None, alias="default")
    any_of: list[Schema] | None = None
    max_length: int | None = None
    title: str | None = None
    min_length: int | None = None
    min_properties: int | None = None
    max_items: int | None = None
    maximum: float | None = None
    nullable: bool | None = None
    max_properties: int | None = None
    type: str | None = None
    description: str | None = None
    enum: list[str] | None = None
    format: str | None = None
    items: Schema | None = None
    properties: dict[str, Schema] | None = None
    required: list[str] | None = None


class SafetySetting(WireModel):
    """A per-category blocking threshold."""

    method: str | None = None
    category: str | None = None
    threshold: str | None = None


class FunctionDeclaration(WireModel):
    """A function the model may call."""

    response: Schema | None = None
    description: str | None = None
    name: str | None = None
    parameters: Schema | None = None


class GoogleSearch(WireModel):
    """Enables the built-in search tool."""


class DynamicRetrievalConfig(WireModel):
    mode: str | None = None
    dynamic_threshold: float | None = None


class GoogleSearchRetrieval(WireModel):
    """Search retrieval with an optional dynamic threshold."""

    dynamic_retrieval_config: DynamicRetrievalConfig | None = None


class VertexAISearch(WireModel):
    datastore: str | None = None


class Retrieval(WireModel):
    """Grounding against a retrieval source (Vertex AI only)."""

    disable_attribution: bool | None = None
    vertex_ai_search: VertexAISearch | None = Field(default=None, alias="vertexAiSearch")
    vertex_rag_store: dict[str, Any] | None = None


class ToolCodeExecution(WireModel):
    """Enables the built-in code-execution tool."""


class Tool(WireModel):
    """Function declarations plus the built-in capabilities."""

    function_declarations: list[FunctionDeclaration] | None = None
    retrieval: Retrieval | None = None
    google_search: GoogleSearch | None = None
    google_search_retrieval: GoogleSearchRetrieval | None = None
    code_execution: ToolCodeExecution | None = None


class FunctionCallingConfig(WireModel):
    mode: str | None = None
    allowed_function_names: list[str] | None = None


class ToolConfig(WireModel):
    """Configuration shared by all tools of a request."""

    function_calling_config: FunctionCallingConfig | None = None


# ---------------------------------------------------------------------------
# Generation config
# ---------------------------------------------------------------------------


class PrebuiltVoiceConfig(WireModel):
    voice_name: str | None = None


class VoiceConfig(WireModel):
    prebuilt_voice_config: PrebuiltVoiceConfig | None = None


class SpeechConfig(WireModel):
    """Voice selection for audio output."""

    voice_config: VoiceConfig | None = None


class GenerationConfigRoutingConfigAutoRoutingMode(WireModel):
    model_routing_preference: str | None = None


class GenerationConfigRoutingConfigManualRoutingMode(WireModel):
    model_name: str | None = None


class GenerationConfigRoutingConfig(WireModel):
    """Model routing (Vertex AI only)."""

    auto_mode: GenerationConfigRoutingConfigAutoRoutingMode | None = None
    manual_mode: GenerationConfigRoutingConfigManualRoutingMode | None = None


class GenerateContentConfig(WireModel):
    """Optional settings for a content-generation call.

    Some fields are hoisted out of ``generationConfig`` on the wire
    (``systemInstruction``, ``safetySettings``, ``tools``, ``toolConfig``,
    ``cachedContent``).
    """

    system_instruction: Content | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: float | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: list[str] | None = None
    response_logprobs: bool | None = None
    logprobs: int | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    seed: int | None = None
    response_mime_type: str | None = None
    response_schema: Schema | None = None
    routing_config: GenerationConfigRoutingConfig | None = None
    safety_settings: list[SafetySetting] | None = None
    tools: list[Tool] | None = None
    tool_config: ToolConfig | None = None
    cached_content: str | None = None
    response_modalities: list[str] | None = None
    media_resolution: str | None = None
    speech_config: SpeechConfig | None = None


class GenerationConfig(WireModel):
    """Raw sampling configuration, used as-is by realtime sessions."""

    candidate_count: int | None = None
    frequency_penalty: float | None = None
    logprobs: int | None = None
    max_output_tokens: int | None = None
    presence_penalty: float | None = None
    response_logprobs: bool | None = None
    response_mime_type: str | None = None
    response_schema: Schema | None = None
    seed: int | None = None
    stop_sequences: list[str] | None = None
    temperature: float | None = None
    top_k: float | None = None
    top_p: float | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class Citation(WireModel):
    end_index: int | None = None
    license: str | None = None
    publication_date: dict[str, Any] | None = None
    start_index: int | None = None
    title: str | None = None
    uri: str | None = None


class CitationMetadata(WireModel):
    citations: list[Citation] | None = None


class SafetyRating(WireModel):
    blocked: bool | None = None
    category: str | None = None
    probability: str | None = None
    probability_score: float | None = None
    severity: str | None = None
    severity_score: float | None = None


class Candidate(WireModel):
    """One generated alternative."""

    content: Content | None = None
    citation_metadata: CitationMetadata | None = None
    finish_message: str | None = None
    token_count: int | None = None
    avg_logprobs: float | None = None
    finish_reason: str | None = None
    grounding_metadata: dict[str, Any] | None = None
    index: int | None = None
    logprobs_result: dict[str, Any] | None = None
    safety_ratings: list[SafetyRating] | None = None


class PromptFeedback(WireModel):
    block_reason: str | None = None
    block_reason_message: str | None = None
    safety_ratings: list[SafetyRating] | None = None


class UsageMetadata(WireModel):
    cached_content_token_count: int | None = None
    candidates_token_count: int | None = None
    prompt_token_count: int | None = None
    total_token_count: int | None = None


class GenerateContentResponse(WireModel):
    """Response of a unary call, or one element of a stream."""

    candidates: list[Candidate] | None = None
    model_version: str | None = None
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None

    def _first_parts(self) -> list[Part]:
        if not self.candidates:
            return []
        content = self.candidates[0].content
        if content is None or not content.parts:
            return []
        return content.parts

    def text(self) -> str:
        """Concatenated text of the first candidate, skipping thought parts.

        Raises
        ------
        ValueError
            If the first candidate holds a non-text part.
        """
        chunks: list[str] = []
        for part in self._first_parts():
            variant = part.non_text_variant
            if variant is not None:
                msg = f"GenerateContentResponse.text only supports text parts, but got {variant}"
                raise ValueError(msg)
            if part.thought:
                continue
            chunks.append(part.text or "")
        return "".join(chunks)

    def function_calls(self) -> list[FunctionCall] | None:
        """Function calls predicted in the first candidate, or None."""
        calls = [part.function_call for part in self._first_parts() if part.function_call is not None]
        return calls or None


# ---------------------------------------------------------------------------
# Realtime session messages
# ---------------------------------------------------------------------------


class LiveConnectConfig(WireModel):
    """Session configuration sent once, inside the setup frame."""

    generation_config: GenerationConfig | None = None
    response_modalities: list[str] | None = None
    speech_config: SpeechConfig | None = None
    system_instruction: Content | None = None
    tools: list[Tool] | None = None


class LiveClientSetup(WireModel):
    model: str | None = None
    generation_config: GenerationConfig | None = None
    system_instruction: Content | None = None
    tools: list[Tool] | None = None


class LiveClientContent(WireModel):
    """Conversation turns appended to the session history."""

    turns: list[Content] | None = None
    turn_complete: bool | None = None


class LiveClientRealtimeInput(WireModel):
    """Streamed media input (audio/video chunks)."""

    media_chunks: list[Blob] | None = None


class LiveClientToolResponse(WireModel):
    function_responses: list[FunctionResponse] | None = None


class LiveClientMessage(WireModel):
    """A client-to-server frame. Only one field is set per message."""

    setup: LiveClientSetup | None = None
    client_content: LiveClientContent | None = None
    realtime_input: LiveClientRealtimeInput | None = None
    tool_response: LiveClientToolResponse | None = None


class LiveServerSetupComplete(WireModel):
    """Sent once in reply to the setup frame."""


class LiveServerContent(WireModel):
    model_turn: Content | None = None
    turn_complete: bool | None = None
    interrupted: bool | None = None


class LiveServerToolCall(WireModel):
    function_calls: list[FunctionCall] | None = None


class LiveServerToolCallCancellation(WireModel):
    ids: list[str] | None = None


class LiveServerMessage(WireModel):
    """A server-to-client frame."""

    setup_complete: LiveServerSetupComplete | None = None
    server_content: LiveServerContent | None = None
    tool_call: LiveServerToolCall | None = None
    tool_call_cancellation: LiveServerToolCallCancellation | None = None
