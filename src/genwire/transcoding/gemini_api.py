"""Gemini API transcoder, the API-key backend.

Key differences from Vertex AI:
- Video metadata parts, Schema constraint fields, safety ``method``,
  function ``response`` schemas and ``retrieval`` tools are rejected.
- Log-probabilities, routing and media resolution settings are rejected.
- Responses carry citations under ``citationSources``.
"""

from genwire.config import Backend
from genwire.transcoding.base import BaseTranscoder


class GeminiAPITranscoder(BaseTranscoder):
    """Converts between typed documents and the Gemini API wire format."""

    backend = Backend.GEMINI_API

    unsupported_fields = {
        "Part": frozenset({"videoMetadata"}),
        "Schema": frozenset(
            {
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
            }
        ),
        "SafetySetting": frozenset({"method"}),
        "FunctionDeclaration": frozenset({"response"}),
        "Tool": frozenset({"retrieval"}),
        "GenerateContentConfig": frozenset(
            {"responseLogprobs", "logprobs", "routingConfig", "mediaResolution"}
        ),
    }

    ignored_fields = {
        "Part": frozenset({"videoMetadata"}),
        "Candidate": frozenset({"finishMessage"}),
    }

    citations_field = "citationSources"
