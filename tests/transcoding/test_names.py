"""Tests for resource-name normalisers."""

import pytest

from genwire.config import Backend, ClientConfig
from genwire.errors import EmptyModelError, TranscodingError
from genwire.transcoding.names import (
    t_cached_content_name,
    t_caches_model,
    t_model,
    t_model_full_name,
    t_resource_name,
    t_schema,
    t_tools,
)

VERTEX = ClientConfig(backend=Backend.VERTEX_AI, project="test-project", location="test-location")
GEMINI = ClientConfig(backend=Backend.GEMINI_API, api_key="key")

FULL = "projects/test-project/locations/test-location/publishers/google/models/gemini-2.0-flash-exp"


class TestModelVertexAI:
    @pytest.mark.parametrize(
        ("raw", "short"),
        [
            ("gemini-2.0-flash-exp", "publishers/google/models/gemini-2.0-flash-exp"),
            ("models/gemini-2.0-flash-exp", "models/gemini-2.0-flash-exp"),
            ("google/gemini-2.0-flash-exp", "publishers/google/models/gemini-2.0-flash-exp"),
            ("publishers/google/models/gemini-2.0-flash-exp", "publishers/google/models/gemini-2.0-flash-exp"),
            (FULL, FULL),
        ],
    )
    def test_short_and_full_names(self, raw: str, short: str) -> None:
        assert t_model(VERTEX, raw) == short
        assert t_model_full_name(VERTEX, raw) == FULL

    def test_other_publisher(self) -> None:
        config = ClientConfig(backend=Backend.VERTEX_AI, project="p", location="l")
        for raw in ("m", "pub/m", "publishers/pub/models/m", "projects/p/locations/l/publishers/pub/models/m"):
            name = t_model_full_name(config, raw)
            if raw == "m":
                assert name == "projects/p/locations/l/publishers/google/models/m"
            else:
                assert name == "projects/p/locations/l/publishers/pub/models/m"

    def test_caches_model_is_full_name(self) -> None:
        assert t_caches_model(VERTEX, "gemini-2.0-flash-exp") == FULL


class TestModelGeminiAPI:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("gemini-2.0-flash-exp", "models/gemini-2.0-flash-exp"),
            ("models/gemini-2.0-flash-exp", "models/gemini-2.0-flash-exp"),
            ("tunedModels/your-tuned-model", "tunedModels/your-tuned-model"),
        ],
    )
    def test_names(self, raw: str, expected: str) -> None:
        assert t_model(GEMINI, raw) == expected
        assert t_model_full_name(GEMINI, raw) == expected


class TestModelErrors:
    @pytest.mark.parametrize("config", [VERTEX, GEMINI])
    def test_empty_model(self, config: ClientConfig) -> None:
        with pytest.raises(EmptyModelError, match="model is empty"):
            t_model(config, "")
        with pytest.raises(EmptyModelError):
            t_model_full_name(config, "")

    def test_non_string_model(self) -> None:
        with pytest.raises(TranscodingError, match="not a string"):
            t_model(GEMINI, 123)


class TestResourceName:
    def test_vertex_forms(self) -> None:
        assert t_resource_name(VERTEX, "projects/x/locations/y/cachedContents/c", "cachedContents") == (
            "projects/x/locations/y/cachedContents/c"
        )
        assert t_resource_name(VERTEX, "locations/y/cachedContents/c", "cachedContents") == (
            "projects/test-project/locations/y/cachedContents/c"
        )
        assert t_resource_name(VERTEX, "cachedContents/c", "cachedContents") == (
            "projects/test-project/locations/test-location/cachedContents/c"
        )
        assert t_resource_name(VERTEX, "c", "cachedContents") == (
            "projects/test-project/locations/test-location/cachedContents/c"
        )

    def test_gemini_forms(self) -> None:
        assert t_resource_name(GEMINI, "cachedContents/c", "cachedContents") == "cachedContents/c"
        assert t_resource_name(GEMINI, "c", "cachedContents") == "cachedContents/c"

    def test_cached_content_name(self) -> None:
        assert t_cached_content_name(GEMINI, "abc") == "cachedContents/abc"
        with pytest.raises(TranscodingError):
            t_cached_content_name(GEMINI, 1)


class TestIdentityPrePasses:
    def test_values_pass_through(self) -> None:
        schema = {"type": "OBJECT"}
        tools = [{"googleSearch": {}}]
        assert t_schema(GEMINI, schema) is schema
        assert t_tools(VERTEX, tools) is tools
