"""Tests for the Client entry point."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from genwire.client import Client
from genwire.config import Backend, ClientConfig
from genwire.errors import ConfigurationError
from genwire.transcoding import GeminiAPITranscoder, VertexAITranscoder


class TestClient:
    def test_gemini_api_from_env(self) -> None:
        with patch.dict("os.environ", {"GOOGLE_API_KEY": "env-key"}, clear=True):
            client = Client()
        assert client.config.backend is Backend.GEMINI_API
        assert client.config.api_key == "env-key"
        assert isinstance(client.models._transcoder, GeminiAPITranscoder)

    def test_vertex_ai(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            client = Client(ClientConfig(backend=Backend.VERTEX_AI, project="p", location="l"))
        assert isinstance(client.models._transcoder, VertexAITranscoder)
        assert client.live._transcoder is client.models._transcoder

    def test_invalid_config(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ConfigurationError, match="api key is required"):
                Client()

    async def test_context_manager_keeps_injected_http_client(self) -> None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        async with Client(ClientConfig(backend=Backend.GEMINI_API, api_key="k"), http_client=http_client):
            pass
        assert not http_client.is_closed
        await http_client.aclose()

    async def test_context_manager_closes_owned_http_client(self) -> None:
        async with Client(ClientConfig(backend=Backend.GEMINI_API, api_key="k")) as client:
            pass
        assert client._api_client._client.is_closed
