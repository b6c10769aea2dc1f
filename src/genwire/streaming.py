"""Server-sent-event decoding for streamed responses.

A streamed body is a sequence of frames separated by a blank line
(``\\n\\n`` or ``\\r\\n\\r\\n``). Every frame must be a ``data:`` line
holding one JSON object.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator, AsyncIterable, Callable
from typing import Any, Generic, TypeVar

import httpx

from genwire.errors import StreamDecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LF_DELIMITER = b"\n\n"
_CRLF_DELIMITER = b"\r\n\r\n"


def _drop_cr(data: bytes) -> bytes:
    return data[:-1] if data.endswith(b"\r") else data


def _split_frame(buffer: bytes) -> tuple[bytes, bytes] | None:
    """Split one complete frame off *buffer*, or return None if there is none yet."""
    index = buffer.find(_LF_DELIMITER)
    if index >= 0:
        return _drop_cr(buffer[:index]), buffer[index + len(_LF_DELIMITER) :]
    index = buffer.find(_CRLF_DELIMITER)
    if index >= 0:
        return _drop_cr(buffer[:index]), buffer[index + len(_CRLF_DELIMITER) :]
    return None


async def iter_frames(chunks: AsyncIterable[bytes]) -> AsyncGenerator[bytes, None]:
    """Yield blank-line-delimited frames from an async byte-chunk source.

    At most one incomplete frame is buffered. A trailing frame without a
    delimiter is yielded when the source ends.
    """
    buffer = b""
    async for chunk in chunks:
        buffer += chunk
        while (split := _split_frame(buffer)) is not None:
            frame, buffer = split
            yield frame
    if buffer:
        yield _drop_cr(buffer)


def parse_frame(frame: bytes) -> dict[str, Any]:
    """Decode the JSON object carried by one ``data:`` frame.

    Raises
    ------
    StreamDecodeError
        If the frame has another prefix or its payload is not a JSON object.
    """
    prefix, _, payload = frame.partition(b":")
    if prefix != b"data":
        msg = "invalid stream chunk"
        raise StreamDecodeError(msg, frame)
    try:
        document = json.loads(payload)
    except ValueError as exc:
        msg = f"invalid JSON in stream chunk: {exc}"
        raise StreamDecodeError(msg, payload) from exc
    if not isinstance(document, dict):
        msg = "stream chunk is not a JSON object"
        raise StreamDecodeError(msg, payload)
    return document


class ResponseStream(Generic[T]):
    """Lazy, single-consumer cursor over a streamed HTTP response.

    Each step reads exactly one frame and converts it with *decoder*. A bad
    frame raises from ``__anext__`` without closing the stream, so the
    consumer may keep pulling or stop. The HTTP response is closed exactly
    once: at the natural end, on a transport error, on :meth:`aclose`, or
    when leaving ``async with``.

    Usage::

        async with await client.models.generate_content_stream(...) as stream:
            async for response in stream:
                print(response.text())
    """

    def __init__(self, response: httpx.Response, decoder: Callable[[dict[str, Any]], T]) -> None:
        self._response = response
        self._decoder = decoder
        self._frames = iter_frames(response.aiter_bytes())
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> ResponseStream[T]:
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration
        try:
            frame = await self._next_frame()
        except BaseException:
            await self.aclose()
            raise
        return self._decoder(parse_frame(frame))

    async def _next_frame(self) -> bytes:
        while True:
            frame = await anext(self._frames)
            if frame:
                return frame

    async def aclose(self) -> None:
        """Release the underlying connection. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing response stream")
        try:
            await self._frames.aclose()
            await self._response.aclose()
        except (httpx.HTTPError, OSError) as exc:
            logger.warning("Error closing response body: %s", exc)

    async def __aenter__(self) -> ResponseStream[T]:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()
