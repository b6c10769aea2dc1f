"""Client: the entry point that wires configuration, transport and transcoder."""

from __future__ import annotations

import logging

import httpx

from genwire.api_client import ApiClient
from genwire.config import ClientConfig
from genwire.live import Connector, Live
from genwire.models import Models
from genwire.transcoding import get_transcoder

logger = logging.getLogger(__name__)


class Client:
    """Async client for the Gemini API and Vertex AI.

    The configuration is resolved once (environment defaults, validation)
    and the backend transcoder is chosen once; ``models`` and ``live`` share
    both.

    Usage::

        async with Client(ClientConfig(api_key="...")) as client:
            response = await client.models.generate_content("gemini-2.0-flash", "Hello")

    Raises
    ------
    ConfigurationError
        If the configuration is incomplete or contradictory.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        live_connector: Connector | None = None,
    ) -> None:
        self.config = (config or ClientConfig()).resolve()
        logger.debug("Client configured for %s", self.config.backend.label)
        self._api_client = ApiClient(self.config, http_client=http_client)
        transcoder = get_transcoder(self.config)
        self.models = Models(self._api_client, transcoder)
        self.live = Live(self.config, transcoder, connector=live_connector)

    async def aclose(self) -> None:
        await self._api_client.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()
