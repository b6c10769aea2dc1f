"""Models: the content-generation entry points.

Both calls follow the same pipeline: dump the typed parameters into a
generic document, run the backend transcoder, render the URL from the
``_url`` sub-document, send, and convert the response back into typed
models. Any step's error propagates to the caller untouched.
"""

from __future__ import annotations

from genwire.api_client import ApiClient
from genwire.contents import ContentsLike, to_contents
from genwire.streaming import ResponseStream
from genwire.transcoding.document import Document, from_document, to_document
from genwire.transcoding.transcoder import Transcoder
from genwire.types import GenerateContentConfig, GenerateContentResponse
from genwire.utils.telemetry import ATTR_BACKEND, ATTR_MODEL, ATTR_STREAM, get_tracer, record_usage

_tracer = get_tracer(__name__)

GENERATE_CONTENT_PATH = "{model}:generateContent"
STREAM_GENERATE_CONTENT_PATH = "{model}:streamGenerateContent?alt=sse"


class Models:
    """Content generation against the configured backend.

    Usage::

        response = await client.models.generate_content("gemini-2.0-flash", "Hello")
        print(response.text())
    """

    def __init__(self, api_client: ApiClient, transcoder: Transcoder) -> None:
        self._api_client = api_client
        self._transcoder = transcoder

    def _build_request(
        self,
        template: str,
        model: str,
        contents: ContentsLike,
        config: GenerateContentConfig | None,
    ) -> tuple[str, Document]:
        parameters = to_document({"model": model, "contents": to_contents(contents), "config": config})
        body = self._transcoder.generate_content_parameters_to_wire(parameters)
        url_params = body.pop("_url", {})
        return ApiClient.format_path(template, url_params), body

    def _decode_response(self, document: Document) -> GenerateContentResponse:
        converted = self._transcoder.generate_content_response_from_wire(document)
        return from_document(GenerateContentResponse, converted)

    async def generate_content(
        self,
        model: str,
        contents: ContentsLike,
        config: GenerateContentConfig | None = None,
    ) -> GenerateContentResponse:
        """Generate a single response.

        Raises
        ------
        TranscodingError
            If the request cannot be expressed on the backend. Raised before
            any network call.
        APIError
            If the backend rejects or fails the request.
        """
        with _tracer.start_as_current_span("models.generate_content") as span:
            span.set_attribute(ATTR_MODEL, model)
            span.set_attribute(ATTR_BACKEND, self._transcoder.backend.value)
            span.set_attribute(ATTR_STREAM, False)

            path, body = self._build_request(GENERATE_CONTENT_PATH, model, contents, config)
            document = await self._api_client.request("POST", path, body)
            response = self._decode_response(document)

            record_usage(span, response.usage_metadata, _finish_reason(response))
            return response

    async def generate_content_stream(
        self,
        model: str,
        contents: ContentsLike,
        config: GenerateContentConfig | None = None,
    ) -> ResponseStream[GenerateContentResponse]:
        """Open a streamed generation and return a lazy cursor over its chunks.

        The request is validated and sent before this returns; each chunk is
        decoded as it is pulled. Close the stream (or use ``async with``) when
        stopping early.
        """
        with _tracer.start_as_current_span("models.generate_content_stream") as span:
            span.set_attribute(ATTR_MODEL, model)
            span.set_attribute(ATTR_BACKEND, self._transcoder.backend.value)
            span.set_attribute(ATTR_STREAM, True)

            path, body = self._build_request(STREAM_GENERATE_CONTENT_PATH, model, contents, config)
            return await self._api_client.request_stream("POST", path, body, self._decode_response)


def _finish_reason(response: GenerateContentResponse) -> str | None:
    if not response.candidates:
        return None
    return response.candidates[0].finish_reason
