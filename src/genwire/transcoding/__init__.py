"""Backend transcoders and the generic-document helpers they are built on."""

from genwire.config import Backend, ClientConfig
from genwire.transcoding.base import BaseTranscoder
from genwire.transcoding.gemini_api import GeminiAPITranscoder
from genwire.transcoding.transcoder import Transcoder
from genwire.transcoding.vertex_ai import VertexAITranscoder

_TRANSCODERS: dict[Backend, type[BaseTranscoder]] = {
    Backend.GEMINI_API: GeminiAPITranscoder,
    Backend.VERTEX_AI: VertexAITranscoder,
}


def get_transcoder(config: ClientConfig) -> Transcoder:
    """Return the transcoder for the configured backend.

    Raises
    ------
    ValueError
        If the backend has not been resolved yet.
    """
    transcoder_cls = _TRANSCODERS.get(config.backend)
    if transcoder_cls is None:
        supported = ", ".join(backend.value for backend in _TRANSCODERS)
        msg = f"No transcoder for backend '{config.backend.value}'. Supported: {supported}"
        raise ValueError(msg)
    return transcoder_cls(config)


__all__ = [
    "BaseTranscoder",
    "GeminiAPITranscoder",
    "Transcoder",
    "VertexAITranscoder",
    "get_transcoder",
]
