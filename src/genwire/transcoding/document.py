"""Path-addressed access to generic JSON documents.

Converters never touch typed models directly. Typed request objects are
dumped into plain ``dict``/``list``/scalar trees (a *document*), rewritten
field by field, and validated back into typed models on the way out.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from genwire.errors import DecodeError, TranscodingError

Document = dict[str, Any]
Converter = Callable[[Document, Document | None], Document]

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def is_empty(value: Any) -> bool:
    """Return True for values that are treated as "not provided".

    ``None``, ``False``, numeric zero, the empty string and empty lists are
    empty. Mappings are never empty: an empty mapping marks a message that is
    present but carries no fields (e.g. ``{"googleSearch": {}}``).
    """
    if value is None:
        return True
    if isinstance(value, dict):
        return False
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float, str, list, tuple)):
        return not value
    return False


def get_value_by_path(data: Any, keys: Sequence[str]) -> Any:
    """Follow *keys* through nested mappings.

    Returns ``None`` when any segment is missing or is not a mapping.
    """
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def set_value_by_path(data: Document | None, keys: Sequence[str], value: Any) -> None:
    """Write *value* at *keys*, creating intermediate mappings.

    Empty values (see :func:`is_empty`) are skipped entirely: no key is
    created for them, though intermediate mappings may be.
    """
    if value is None or data is None:
        return
    for key in keys[:-1]:
        child = data.get(key)
        if not isinstance(child, dict):
            child = {}
            data[key] = child
        data = child
    if not is_empty(value):
        data[keys[-1]] = value


def format_map(template: str, variables: Document) -> str:
    """Substitute ``{key}`` placeholders in *template* from *variables*.

    Placeholders without a variable are dropped. A non-string value is an
    error.
    """
    out: list[str] = []
    i = 0
    while i < len(template):
        char = template[i]
        if char != "{":
            out.append(char)
            i += 1
            continue
        end = template.find("}", i + 1)
        if end < 0:
            i += 1
            continue
        key = template[i + 1 : end]
        if key in variables:
            value = variables[key]
            if not isinstance(value, str):
                msg = f"format_map: unsupported value type {type(value).__name__} for {key!r}"
                raise TranscodingError(msg)
            out.append(value)
        i = end + 1
    return "".join(out)


def apply_converter_to_list(items: Any, converter: Converter) -> list[Document]:
    """Run *converter* over every document in *items*, in order.

    The first failure aborts the whole list.
    """
    if not isinstance(items, list):
        msg = f"expected a list of objects, got {type(items).__name__}"
        raise TranscodingError(msg)
    outputs: list[Document] = []
    for item in items:
        if not isinstance(item, dict):
            msg = f"expected an object, got {type(item).__name__}"
            raise TranscodingError(msg)
        outputs.append(converter(item, None))
    return outputs


def apply_transformer_to_list(items: Sequence[T], transformer: Callable[[T], T]) -> list[T]:
    """Run a value-to-value *transformer* over *items*, in order."""
    return [transformer(item) for item in items]


def to_document(value: Any) -> Any:
    """Marshal typed models (or containers of them) into a generic document."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, dict):
        return {key: to_document(item) for key, item in value.items() if item is not None}
    if isinstance(value, (list, tuple)):
        return [to_document(item) for item in value]
    return value


def from_document(model: type[M], document: Document) -> M:
    """Materialise a typed model from a converted document.

    The document goes through JSON text so that base64 byte fields decode
    the same way they do off the wire. Unknown keys are dropped by the models
    themselves (``extra="ignore"``).
    """
    raw = json.dumps(document)
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        msg = f"cannot materialise {model.__name__}: {exc}"
        raise DecodeError(msg, raw) from exc
