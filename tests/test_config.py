"""Tests for client configuration resolution."""

from __future__ import annotations

import pytest

from genwire.config import Backend, ClientConfig, HttpOptions
from genwire.errors import ConfigurationError


class TestBackend:
    def test_labels(self) -> None:
        assert Backend.GEMINI_API.label == "Google AI"
        assert Backend.VERTEX_AI.label == "Vertex AI"


class TestResolveBackend:
    @pytest.mark.parametrize("flag", ["1", "true", "TRUE", "True"])
    def test_vertex_from_env(self, flag: str) -> None:
        cfg = ClientConfig().resolve(
            {"GOOGLE_GENAI_USE_VERTEXAI": flag, "GOOGLE_CLOUD_PROJECT": "p", "GOOGLE_CLOUD_LOCATION": "l"}
        )
        assert cfg.backend is Backend.VERTEX_AI
        assert cfg.is_vertex

    @pytest.mark.parametrize("flag", ["", "0", "false", "yes"])
    def test_gemini_api_otherwise(self, flag: str) -> None:
        cfg = ClientConfig().resolve({"GOOGLE_GENAI_USE_VERTEXAI": flag, "GOOGLE_API_KEY": "k"})
        assert cfg.backend is Backend.GEMINI_API

    def test_explicit_backend_wins_over_env(self) -> None:
        cfg = ClientConfig(backend=Backend.GEMINI_API, api_key="k").resolve({"GOOGLE_GENAI_USE_VERTEXAI": "true"})
        assert cfg.backend is Backend.GEMINI_API


class TestResolveCredentials:
    def test_api_key_from_env(self) -> None:
        cfg = ClientConfig().resolve({"GOOGLE_API_KEY": "env-key"})
        assert cfg.api_key == "env-key"

    def test_explicit_api_key_wins(self) -> None:
        cfg = ClientConfig(api_key="mine").resolve({"GOOGLE_API_KEY": "env-key"})
        assert cfg.api_key == "mine"

    def test_vertex_does_not_read_api_key(self) -> None:
        cfg = ClientConfig(backend=Backend.VERTEX_AI, project="p", location="l").resolve({"GOOGLE_API_KEY": "k"})
        assert cfg.api_key is None

    def test_region_fallback(self) -> None:
        cfg = ClientConfig(backend=Backend.VERTEX_AI, project="p").resolve({"GOOGLE_CLOUD_REGION": "europe-west4"})
        assert cfg.location == "europe-west4"

    def test_location_preferred_over_region(self) -> None:
        cfg = ClientConfig(backend=Backend.VERTEX_AI, project="p").resolve(
            {"GOOGLE_CLOUD_LOCATION": "us-east1", "GOOGLE_CLOUD_REGION": "europe-west4"}
        )
        assert cfg.location == "us-east1"


class TestResolveErrors:
    def test_project_and_api_key(self) -> None:
        with pytest.raises(ConfigurationError, match="project and API key are mutually exclusive"):
            ClientConfig(project="p", api_key="k").resolve({})

    def test_location_and_api_key(self) -> None:
        with pytest.raises(ConfigurationError, match="location and API key are mutually exclusive"):
            ClientConfig(location="l", api_key="k").resolve({})

    def test_vertex_requires_project(self) -> None:
        with pytest.raises(ConfigurationError, match="project is required for Vertex AI backend"):
            ClientConfig(backend=Backend.VERTEX_AI, location="l").resolve({})

    def test_vertex_requires_location(self) -> None:
        with pytest.raises(ConfigurationError, match="location is required for Vertex AI backend"):
            ClientConfig(backend=Backend.VERTEX_AI, project="p").resolve({})

    def test_gemini_api_requires_key(self) -> None:
        with pytest.raises(ConfigurationError, match="api key is required for Google AI backend"):
            ClientConfig().resolve({})


class TestResolveHttpOptions:
    def test_gemini_api_defaults(self) -> None:
        cfg = ClientConfig(api_key="k").resolve({})
        assert cfg.http_options.base_url == "https://generativelanguage.googleapis.com/"
        assert cfg.http_options.api_version == "v1beta"

    def test_vertex_defaults(self) -> None:
        cfg = ClientConfig(backend=Backend.VERTEX_AI, project="p", location="us-central1").resolve({})
        assert cfg.http_options.base_url == "https://us-central1-aiplatform.googleapis.com/"
        assert cfg.http_options.api_version == "v1beta1"

    def test_overrides_are_kept(self) -> None:
        options = HttpOptions(base_url="http://localhost:8080/", api_version="v1")
        cfg = ClientConfig(api_key="k", http_options=options).resolve({})
        assert cfg.http_options.base_url == "http://localhost:8080/"
        assert cfg.http_options.api_version == "v1"

    def test_original_is_not_mutated(self) -> None:
        original = ClientConfig(api_key="k")
        original.resolve({})
        assert original.http_options.base_url is None
        assert original.backend is Backend.UNSPECIFIED


class TestAccessToken:
    async def test_static_token(self) -> None:
        assert await ClientConfig(access_token="tok").get_access_token() == "tok"

    async def test_sync_provider(self) -> None:
        cfg = ClientConfig(access_token="ignored", token_provider=lambda: "fresh")
        assert await cfg.get_access_token() == "fresh"

    async def test_async_provider(self) -> None:
        async def provider() -> str:
            return "async-token"

        assert await ClientConfig(token_provider=provider).get_access_token() == "async-token"

    async def test_no_credentials(self) -> None:
        assert await ClientConfig().get_access_token() is None
