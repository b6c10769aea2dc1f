"""Live: realtime bidirectional sessions over a websocket.

Requires the ``websockets`` package (optional dependency ``live``).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import urlsplit

from genwire.config import ClientConfig
from genwire.errors import APIError, DecodeError, LiveSessionError
from genwire.transcoding.document import Document, from_document, to_document
from genwire.transcoding.names import t_model_full_name
from genwire.transcoding.transcoder import Transcoder
from genwire.types import LiveClientMessage, LiveConnectConfig, LiveServerMessage
from genwire.utils.telemetry import ATTR_BACKEND, ATTR_MODEL, get_tracer

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)

VERTEX_AI_LIVE_PATH = "/ws/google.cloud.aiplatform.v1beta1.LlmBidiService/BidiGenerateContent"
GEMINI_API_LIVE_PATH = "/ws/google.ai.generativelanguage.v1alpha.GenerativeService.BidiGenerateContent"

# (url, headers) -> open websocket connection
Connector = Callable[[str, dict[str, str]], Awaitable[Any]]


async def _websockets_connect(url: str, headers: dict[str, str]) -> Any:
    try:
        import websockets  # type: ignore[import-untyped]
    except ImportError as exc:
        msg = "websockets package required for live sessions, install with: pip install genwire[live]"
        raise ImportError(msg) from exc
    return await websockets.connect(url, additional_headers=headers)


class AsyncSession:
    """One realtime conversation.

    Not safe for concurrent ``send`` or concurrent ``receive`` calls; the
    caller serialises its own use.
    """

    def __init__(self, ws: Any, transcoder: Transcoder) -> None:
        self._ws: Any = ws
        self._transcoder = transcoder

    def _connection(self) -> Any:
        if self._ws is None:
            msg = "session is closed"
            raise LiveSessionError(msg)
        return self._ws

    async def send(self, message: LiveClientMessage) -> None:
        """Convert *message* to wire form and write it as one frame.

        Raises
        ------
        LiveSessionError
            If *message* carries a setup payload; setup only happens in
            :meth:`Live.connect`. Nothing is written in that case.
        """
        if message.setup is not None:
            msg = "message setup is not supported in send(), use Live.connect() instead"
            raise LiveSessionError(msg)
        ws = self._connection()
        body = self._transcoder.live_send_parameters_to_wire(to_document({"input": message}))
        body.pop("input", None)
        await ws.send(json.dumps(body))

    async def receive(self) -> LiveServerMessage:
        """Read exactly one frame and return it as a typed message.

        Raises
        ------
        APIError
            ``ClientError`` or ``ServerError`` if the frame carries a top-level
            ``error`` object, classified by its embedded code. The raw frame
            is kept on the chained ``LiveSessionError``.
        DecodeError
            If the frame is not a JSON object.
        """
        raw = await self._connection().recv()
        try:
            document = json.loads(raw)
        except ValueError as exc:
            msg = f"invalid message format: {exc}"
            raise DecodeError(msg, raw) from exc
        if not isinstance(document, dict):
            msg = "invalid message format: not a JSON object"
            raise DecodeError(msg, raw)
        if document.get("error") is not None:
            msg = "received error in response"
            raise APIError.from_error_document(document) from LiveSessionError(msg, raw)
        converted = self._transcoder.live_server_message_from_wire(document)
        return from_document(LiveServerMessage, converted)

    async def close(self) -> None:
        """Close the websocket. Further calls are no-ops."""
        if self._ws is not None:
            ws, self._ws = self._ws, None
            logger.debug("Closing live session")
            await ws.close()

    async def __aenter__(self) -> AsyncSession:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()


class Live:
    """Factory for realtime sessions.

    Usage::

        async with await client.live.connect("gemini-2.0-flash-exp") as session:
            await session.send(LiveClientMessage(client_content=...))
            message = await session.receive()
    """

    def __init__(
        self,
        config: ClientConfig,
        transcoder: Transcoder,
        connector: Connector | None = None,
    ) -> None:
        self._config = config
        self._transcoder = transcoder
        self._connector = connector or _websockets_connect

    def _endpoint(self) -> str:
        base = urlsplit(self._config.http_options.base_url or "")
        scheme = base.scheme if base.scheme in ("ws", "wss") else "wss"
        if self._config.is_vertex:
            return f"{scheme}://{base.netloc}{VERTEX_AI_LIVE_PATH}"
        return f"{scheme}://{base.netloc}{GEMINI_API_LIVE_PATH}?key={self._config.api_key}"

    async def _headers(self) -> dict[str, str]:
        if not self._config.is_vertex:
            return {}
        try:
            token = await self._config.get_access_token()
        except Exception as exc:
            msg = f"failed to get token: {exc}"
            raise LiveSessionError(msg) from exc
        return {"Content-Type": "application/json", "Authorization": f"Bearer {token}"}

    def _setup_frame(self, model: str, config: LiveConnectConfig | None) -> Document:
        parameters = to_document({"model": t_model_full_name(self._config, model), "config": config})
        body = self._transcoder.live_connect_parameters_to_wire(parameters)
        body.pop("config", None)
        return body

    async def connect(self, model: str, config: LiveConnectConfig | None = None) -> AsyncSession:
        """Open a session: dial, send the setup frame, await one reply.

        On any failure no session is left open.
        """
        with _tracer.start_as_current_span("live.connect") as span:
            span.set_attribute(ATTR_MODEL, model)
            span.set_attribute(ATTR_BACKEND, self._transcoder.backend.value)

            setup = self._setup_frame(model, config)
            headers = await self._headers()
            url = self._endpoint()
            logger.debug("Connecting live session to %s", url.split("?", 1)[0])
            ws = await self._connector(url, headers)

            session = AsyncSession(ws, self._transcoder)
            try:
                await ws.send(json.dumps(setup))
                await session.receive()
            except Exception as exc:
                await session.close()
                msg = f"failed to connect to the server: {exc}"
                raise LiveSessionError(msg) from exc
            except BaseException:
                await session.close()
                raise
            return session
