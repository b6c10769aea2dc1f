"""Resource-name normalisers and value pre-passes.

These run before a field's converter so converters never need to know the
shape of a resource name. All functions are pure functions of the value and
the client configuration (backend, project, location).
"""

from __future__ import annotations

from typing import Any

from genwire.config import ClientConfig
from genwire.errors import EmptyModelError, TranscodingError


def t_resource_name(config: ClientConfig, resource_name: str, resource_prefix: str) -> str:
    """Qualify *resource_name* of type *resource_prefix* (e.g. ``cachedContents``)."""
    if config.is_vertex:
        if resource_name.startswith("projects/"):
            return resource_name
        if resource_name.startswith("locations/"):
            return f"projects/{config.project}/{resource_name}"
        if resource_name.startswith(f"{resource_prefix}/"):
            return f"projects/{config.project}/locations/{config.location}/{resource_name}"
        return f"projects/{config.project}/locations/{config.location}/{resource_prefix}/{resource_name}"
    if resource_name.startswith(f"{resource_prefix}/"):
        return resource_name
    return f"{resource_prefix}/{resource_name}"


def t_cached_content_name(config: ClientConfig, name: Any) -> str:
    if not isinstance(name, str):
        msg = "cached content name is not a string"
        raise TranscodingError(msg)
    return t_resource_name(config, name, "cachedContents")


def t_model(config: ClientConfig, origin: Any) -> str:
    """Normalise a model identifier to the backend's short resource name.

    Vertex AI: ``m`` -> ``publishers/google/models/m``, ``pub/m`` ->
    ``publishers/pub/models/m``; names starting with ``projects/``,
    ``models/`` or ``publishers/`` pass through. Gemini API: ``m`` ->
    ``models/m``; ``models/`` and ``tunedModels/`` pass through.

    Raises
    ------
    EmptyModelError
        If *origin* is the empty string.
    TranscodingError
        If *origin* is not a string.
    """
    if not isinstance(origin, str):
        msg = "model is not a string"
        raise TranscodingError(msg)
    if not origin:
        raise EmptyModelError
    if config.is_vertex:
        if origin.startswith(("projects/", "models/", "publishers/")):
            return origin
        if "/" in origin:
            publisher, model = origin.split("/", 1)
            return f"publishers/{publisher}/models/{model}"
        return f"publishers/google/models/{origin}"
    if origin.startswith(("models/", "tunedModels/")):
        return origin
    return f"models/{origin}"


def t_model_full_name(config: ClientConfig, origin: Any) -> str:
    """Like :func:`t_model`, but fully qualified with project and location on Vertex AI."""
    name = t_model(config, origin)
    if config.is_vertex:
        if name.startswith("publishers/"):
            return f"projects/{config.project}/locations/{config.location}/{name}"
        if name.startswith("models/"):
            return f"projects/{config.project}/locations/{config.location}/publishers/google/{name}"
    return name


def t_caches_model(config: ClientConfig, origin: Any) -> str:
    return t_model_full_name(config, origin)


# Identity pre-passes. They mark the fields where a typed normalisation step
# sits in the pipeline, and keep the converters symmetric across backends.


def t_content(config: ClientConfig, content: Any) -> Any:
    return content


def t_contents(config: ClientConfig, contents: Any) -> Any:
    return contents


def t_tool(config: ClientConfig, tool: Any) -> Any:
    return tool


def t_tools(config: ClientConfig, tools: Any) -> Any:
    return tools


def t_schema(config: ClientConfig, origin: Any) -> Any:
    return origin


def t_speech_config(config: ClientConfig, speech_config: Any) -> Any:
    return speech_config


def t_bytes(config: ClientConfig, data: Any) -> Any:
    return data
