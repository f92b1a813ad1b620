"""Backend registry and factory."""
from __future__ import annotations

from .base import BaseBackend

_REGISTRY: dict[str, type[BaseBackend]] = {}

def register_backend(backend: type[BaseBackend]) -> type[BaseBackend]:
    """Register a backend class and return it for decorator use."""
    for suf in backend.suffixes:
        _REGISTRY[suf] = backend
    return backend

def get_backend_for_suffix(suffix: str) -> BaseBackend:
    if not suffix.startswith("."):
        suffix = f".{suffix}"
    backend_cls = _REGISTRY.get(suffix.lower())
    if backend_cls is None:
        raise ValueError(f"No backend for {suffix}")
    return backend_cls()

def registered_suffixes() -> list[str]:
    return sorted(_REGISTRY)

# register default backends
from . import json_backend, toml_backend, yaml_backend  # noqa: F401,E402

__all__ = [
    "BaseBackend",
    "get_backend_for_suffix",
    "register_backend",
    "registered_suffixes",
]
