"""Vertex AI transcoder, the project-scoped backend.

Key differences from the Gemini API:
- ``thought`` parts and function response ids are rejected.
- Function ``response`` schemas are converted like any other schema.
- Responses never carry ``thought`` flags, token counts or function call ids.
"""

from genwire.config import Backend
from genwire.transcoding.base import BaseTranscoder


class VertexAITranscoder(BaseTranscoder):
    """Converts between typed documents and the Vertex AI wire format."""

    backend = Backend.VERTEX_AI

    unsupported_fields = {
        "Part": frozenset({"thought"}),
        "FunctionResponse": frozenset({"id"}),
    }

    ignored_fields = {
        "Part": frozenset({"thought"}),
        "Candidate": frozenset({"tokenCount"}),
        "FunctionCall": frozenset({"id"}),
    }
