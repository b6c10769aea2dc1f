"""genwire: a typed async client for the Gemini API and Vertex AI."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from genwire.client import Client as Client
    from genwire.config import Backend as Backend
    from genwire.config import ClientConfig as ClientConfig
    from genwire.config import HttpOptions as HttpOptions

_EXPORTS = {
    "Client": "genwire.client",
    "Backend": "genwire.config",
    "ClientConfig": "genwire.config",
    "HttpOptions": "genwire.config",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'genwire' has no attribute {name!r}")
