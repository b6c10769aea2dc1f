"""Coercion of the accepted "contents" shapes into ``list[Content]``."""

from __future__ import annotations

from collections.abc import Sequence

from genwire.types import (
    ROLE_USER,
    Blob,
    CodeExecutionResult,
    Content,
    ExecutableCode,
    FileData,
    FunctionCall,
    FunctionResponse,
    Part,
    VideoMetadata,
)

PartLike = (
    str
    | Part
    | Blob
    | FileData
    | FunctionCall
    | FunctionResponse
    | ExecutableCode
    | CodeExecutionResult
    | VideoMetadata
)
ContentsLike = str | Content | Sequence[Content] | Sequence[PartLike]


def to_part(value: PartLike) -> Part:
    """Wrap a single part variant in a :class:`Part`."""
    if isinstance(value, Part):
        return value
    if isinstance(value, str):
        return Part.from_text(value)
    if isinstance(value, Blob):
        return Part(inline_data=Blob(data=value.data, mime_type=value.mime_type))
    if isinstance(value, FileData):
        return Part(file_data=value)
    if isinstance(value, FunctionCall):
        return Part(function_call=value)
    if isinstance(value, FunctionResponse):
        return Part(function_response=value)
    if isinstance(value, ExecutableCode):
        return Part(executable_code=value)
    if isinstance(value, CodeExecutionResult):
        return Part(code_execution_result=value)
    if isinstance(value, VideoMetadata):
        return Part(video_metadata=value)
    msg = f"cannot convert {type(value).__name__} to a Part"
    raise TypeError(msg)


def to_contents(value: ContentsLike) -> list[Content]:
    """Normalise *value* into a list of contents.

    - ``str``: one user content with one text part.
    - ``Content``: a one-element list.
    - a sequence of ``Content``: returned as a list, unchanged.
    - a sequence of strings or part variants: one user content holding one
      part per element, in order.

    Raises
    ------
    TypeError
        If an element cannot be turned into a part, or contents and parts
        are mixed in one sequence.
    """
    if isinstance(value, str):
        return [Content.from_text(value)]
    if isinstance(value, Content):
        return [value]
    items = list(value)
    if not items:
        return []
    if all(isinstance(item, Content) for item in items):
        return items  # type: ignore[return-value]
    if any(isinstance(item, Content) for item in items):
        msg = "contents cannot mix Content objects with parts"
        raise TypeError(msg)
    return [Content(parts=[to_part(item) for item in items], role=ROLE_USER)]  # type: ignore[arg-type]
