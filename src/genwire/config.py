"""Client configuration: backend selection, credentials, HTTP options."""

from __future__ import annotations

import os
from collections.abc import Awaitable
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from genwire.errors import ConfigurationError

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/"
VERTEX_AI_BASE_URL = "https://{location}-aiplatform.googleapis.com/"


class Backend(str, Enum):
    """The two wire-compatible targets of the API."""

    UNSPECIFIED = "unspecified"
    GEMINI_API = "gemini_api"
    VERTEX_AI = "vertex_ai"

    @property
    def label(self) -> str:
        """Human readable name used in error messages."""
        return "Vertex AI" if self is Backend.VERTEX_AI else "Google AI"


class HttpOptions(BaseModel):
    """User overridable HTTP options.

    ``timeout`` is in milliseconds; ``None`` leaves requests unbounded.
    """

    base_url: str | None = None
    api_version: str | None = None
    timeout: int | None = None


class ClientConfig(BaseModel):
    """Configuration for a :class:`~genwire.client.Client`.

    The Gemini API backend needs ``api_key``; Vertex AI needs ``project``,
    ``location`` and already-resolved credentials (``access_token`` or a
    ``token_provider`` callable). Call :meth:`resolve` to fill the gaps from
    the environment and validate the combination.
    """

    model_config = {"arbitrary_types_allowed": True}

    api_key: str | None = None
    backend: Backend = Backend.UNSPECIFIED
    project: str | None = None
    location: str | None = None
    access_token: str | None = None
    token_provider: Any = None
    http_options: HttpOptions = Field(default_factory=HttpOptions)
    headers: dict[str, str] = Field(default_factory=lambda: dict[str, str]())

    @property
    def is_vertex(self) -> bool:
        return self.backend is Backend.VERTEX_AI

    def resolve(self, environ: dict[str, str] | None = None) -> ClientConfig:
        """Return a copy with environment defaults applied and validated.

        Raises
        ------
        ConfigurationError
            On mutually exclusive or missing settings.
        """
        env = os.environ if environ is None else environ
        cfg = self.model_copy(update={"http_options": self.http_options.model_copy()})

        if cfg.project and cfg.api_key:
            msg = "project and API key are mutually exclusive in the client initializer"
            raise ConfigurationError(msg)
        if cfg.location and cfg.api_key:
            msg = "location and API key are mutually exclusive in the client initializer"
            raise ConfigurationError(msg)

        if cfg.backend is Backend.UNSPECIFIED:
            flag = env.get("GOOGLE_GENAI_USE_VERTEXAI", "").lower()
            cfg.backend = Backend.VERTEX_AI if flag in ("1", "true") else Backend.GEMINI_API

        if not cfg.api_key and cfg.backend is Backend.GEMINI_API:
            cfg.api_key = env.get("GOOGLE_API_KEY") or None
        if not cfg.project:
            cfg.project = env.get("GOOGLE_CLOUD_PROJECT") or None
        if not cfg.location:
            cfg.location = env.get("GOOGLE_CLOUD_LOCATION") or env.get("GOOGLE_CLOUD_REGION") or None

        if cfg.is_vertex:
            if not cfg.project:
                msg = "project is required for Vertex AI backend"
                raise ConfigurationError(msg)
            if not cfg.location:
                msg = "location is required for Vertex AI backend"
                raise ConfigurationError(msg)
        elif not cfg.api_key:
            msg = (
                "api key is required for Google AI backend. "
                "You can get the API key from https://ai.google.dev/gemini-api/docs/api-key"
            )
            raise ConfigurationError(msg)

        options = cfg.http_options
        if not options.base_url:
            options.base_url = (
                VERTEX_AI_BASE_URL.format(location=cfg.location) if cfg.is_vertex else GEMINI_API_BASE_URL
            )
        if not options.api_version:
            options.api_version = "v1beta1" if cfg.is_vertex else "v1beta"
        return cfg

    async def get_access_token(self) -> str | None:
        """Return the bearer token for Vertex AI requests, if any."""
        if self.token_provider is not None:
            token = self.token_provider()
            if isinstance(token, Awaitable):
                token = await token
            return str(token)
        return self.access_token
