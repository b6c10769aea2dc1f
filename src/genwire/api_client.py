"""ApiClient: the HTTP transport shared by every resource.

Builds backend URLs, attaches credentials and client headers, and turns
non-2xx responses into :class:`~genwire.errors.APIError`.
"""

from __future__ import annotations

import json
import logging
import platform
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from genwire import __version__
from genwire.config import ClientConfig
from genwire.errors import APIError, DecodeError, TranscodingError
from genwire.streaming import ResponseStream
from genwire.transcoding.document import Document, format_map

logger = logging.getLogger(__name__)

T = TypeVar("T")

LIBRARY_LABEL = f"genwire/{__version__}"
LANGUAGE_LABEL = f"python/{platform.python_version()}"


class ApiClient:
    """Sends JSON requests to the configured backend.

    *config* must already be resolved (see :meth:`ClientConfig.resolve`).
    An ``http_client`` may be injected, e.g. one built on
    ``httpx.MockTransport``; it is then owned by the caller.
    """

    def __init__(self, config: ClientConfig, http_client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._owns_client = http_client is None
        if http_client is None:
            timeout = config.http_options.timeout
            http_client = httpx.AsyncClient(timeout=timeout / 1000 if timeout else None)
        self._client = http_client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # URL and headers
    # ------------------------------------------------------------------

    def create_api_url(self, suffix: str) -> str:
        """Return ``{base_url}/{api_version}/{suffix}``.

        Vertex AI suffixes are scoped to the configured project and location
        unless they already start with ``projects/``.
        """
        cfg = self.config
        if cfg.is_vertex and not suffix.startswith("projects/"):
            suffix = f"projects/{cfg.project}/locations/{cfg.location}/{suffix}"
        base_url = (cfg.http_options.base_url or "").rstrip("/")
        return f"{base_url}/{cfg.http_options.api_version}/{suffix}"

    @staticmethod
    def format_path(template: str, url_params: Document) -> str:
        """Render a path template such as ``{model}:generateContent``."""
        try:
            return format_map(template, url_params)
        except TranscodingError as exc:
            msg = f"invalid url params: {url_params!r}. {exc}"
            raise TranscodingError(msg) from exc

    async def build_headers(self) -> dict[str, str]:
        headers = dict(self.config.headers)
        headers["Content-Type"] = "application/json"
        if self.config.api_key:
            headers["x-goog-api-key"] = self.config.api_key
        if self.config.is_vertex:
            token = await self.config.get_access_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        version = f"{LIBRARY_LABEL} {LANGUAGE_LABEL}"
        for name in ("user-agent", "x-goog-api-client"):
            existing = headers.get(name)
            headers[name] = f"{existing} {version}" if existing else version
        return headers

    async def _build_request(self, method: str, path: str, body: Document | None) -> httpx.Request:
        url = self.create_api_url(path)
        logger.debug("%s %s", method, url)
        return self._client.build_request(method, url, json=body, headers=await self.build_headers())

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def request(self, method: str, path: str, body: Document | None = None) -> Document:
        """Send a unary request and return the decoded JSON body.

        Raises
        ------
        APIError
            ``ClientError`` on 4xx, ``ServerError`` on any other non-2xx.
        DecodeError
            If the body is not a JSON object.
        """
        request = await self._build_request(method, path, body)
        response = await self._client.send(request)
        if not response.is_success:
            raise await _api_error(response)
        try:
            document = response.json()
        except ValueError as exc:
            msg = f"error unmarshalling response: {exc}"
            raise DecodeError(msg, response.content) from exc
        if not isinstance(document, dict):
            msg = "response is not a JSON object"
            raise DecodeError(msg, response.content)
        return document

    async def request_stream(
        self,
        method: str,
        path: str,
        body: Document | None,
        decoder: Callable[[Document], T],
    ) -> ResponseStream[T]:
        """Send a request whose body is a server-sent-event stream.

        The returned stream owns the open response and must be exhausted or
        closed by the caller.
        """
        request = await self._build_request(method, path, body)
        response = await self._client.send(request, stream=True)
        if not response.is_success:
            try:
                raise await _api_error(response)
            finally:
                await response.aclose()
        logger.debug("Opened response stream %s", request.url)
        return ResponseStream(response, decoder)


async def _api_error(response: httpx.Response) -> Exception:
    """Build the error for a non-2xx response."""
    body = await response.aread()
    status = f"{response.status_code} {response.reason_phrase}"
    if not body:
        return APIError.from_payload(response.status_code, None, status)
    try:
        payload: Any = json.loads(body)
    except ValueError as exc:
        msg = f"unmarshal response to error failed: {exc}"
        return DecodeError(msg, body)
    return APIError.from_payload(response.status_code, payload if isinstance(payload, dict) else None, status)
