"""Transcoder protocol: converts between typed documents and backend wire JSON.

Each backend (Gemini API, Vertex AI) has a concrete transcoder. A client
picks one when it is built and routes every request and response through it;
no entry point branches on the backend itself.
"""

from typing import Protocol

from genwire.config import Backend
from genwire.transcoding.document import Document


class Transcoder(Protocol):
    """Protocol for backend-specific request/response transcoders.

    Request-direction methods take the generic document of the call's
    parameters and return the wire body. They raise
    :class:`~genwire.errors.TranscodingError` (usually
    :class:`~genwire.errors.UnsupportedFieldError`) before any network call
    when the request cannot be expressed on the backend.
    """

    backend: Backend

    def generate_content_parameters_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        """Convert ``{"model", "contents", "config"}`` to a request body.

        The normalised model name is written under ``_url.model`` for path
        templating; callers remove ``_url`` before sending.
        """
        ...

    def generate_content_response_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        """Convert a raw response body (or one stream frame) to typed-model shape."""
        ...

    def live_connect_parameters_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        """Convert ``{"model", "config"}`` to the realtime setup frame.

        The result still holds a ``config`` key that callers drop.
        """
        ...

    def live_send_parameters_to_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        """Convert ``{"input": <client message>}`` to one realtime frame.

        The result still holds an ``input`` key that callers drop.
        """
        ...

    def live_server_message_from_wire(
        self, from_object: Document, parent_object: Document | None = None
    ) -> Document:
        """Convert one realtime server frame to typed-model shape."""
        ...
