"""Shared error types for the genwire client."""

from __future__ import annotations

from typing import Any


class GenAIError(Exception):
    """Base error for all genwire failures."""


class ConfigurationError(GenAIError):
    """The client configuration is incomplete or contradictory."""


class TranscodingError(GenAIError):
    """A request or response could not be converted to/from wire form.

    Always raised locally, before any network call is made for requests.
    """


class UnsupportedFieldError(TranscodingError):
    """A field that the selected backend rejects was set on a request."""

    def __init__(self, field: str, backend: str) -> None:
        self.field = field
        self.backend = backend
        super().__init__(f"{field} parameter is not supported in {backend}")


class EmptyModelError(TranscodingError):
    """The model identifier was empty."""

    def __init__(self) -> None:
        super().__init__("model is empty")


class DecodeError(GenAIError):
    """A payload returned by the backend was not valid JSON."""

    def __init__(self, detail: str, payload: str | bytes = "") -> None:
        self.detail = detail
        self.payload = payload.decode(errors="replace") if isinstance(payload, bytes) else payload
        msg = detail
        if self.payload:
            msg += f"\n{self.payload}"
        super().__init__(msg)


class StreamDecodeError(DecodeError):
    """A single server-sent-event frame could not be decoded."""


class LiveSessionError(GenAIError):
    """A realtime session was misused or the backend reported an error frame."""

    def __init__(self, detail: str, frame: str | bytes | None = None) -> None:
        self.detail = detail
        self.frame = frame
        super().__init__(detail if frame is None else f"{detail}: {frame!s}")


class APIError(GenAIError):
    """An error returned by the backend over HTTP.

    Carries the numeric ``code``, the human readable ``message``, the
    ``status`` token (e.g. ``INVALID_ARGUMENT``) and any structured
    ``details`` entries from the response body.
    """

    kind = "api"

    def __init__(
        self,
        code: int,
        message: str = "",
        status: str = "",
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status = status
        self.details = details or []
        super().__init__(
            f"{self.kind} error. Code: {code}, Message: {message}, "
            f"Status: {status}, Details: {self.details}"
        )

    @classmethod
    def from_payload(cls, status_code: int, payload: dict[str, Any] | None, reason: str = "") -> APIError:
        """Build a ClientError (4xx) or ServerError (anything else)."""
        error_cls: type[APIError] = ClientError if 400 <= status_code < 500 else ServerError
        info = (payload or {}).get("error")
        if not isinstance(info, dict):
            return error_cls(code=status_code, status=reason)
        details = info.get("details")
        if isinstance(details, dict):
            details = [details]
        return error_cls(
            code=_coerce_code(info.get("code"), status_code),
            message=str(info.get("message", "")),
            status=str(info.get("status", "")),
            details=[entry for entry in details if isinstance(entry, dict)] if isinstance(details, list) else [],
        )

    @classmethod
    def from_error_document(cls, document: dict[str, Any]) -> APIError:
        """Classify a decoded document's top-level ``error`` object by its own code.

        Used where there is no HTTP status, e.g. realtime frames. A missing
        or unusable code counts as a server fault.
        """
        info = document.get("error")
        code = _coerce_code(info.get("code") if isinstance(info, dict) else None, 500)
        return cls.from_payload(code, document)


def _coerce_code(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


class ClientError(APIError):
    """The backend rejected the request (HTTP 4xx)."""

    kind = "client"


class ServerError(APIError):
    """The backend failed while serving the request (HTTP 5xx or unclassified)."""

    kind = "server"
