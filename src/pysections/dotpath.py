"""Dot-separated addressing across sections.

A path reads ``section.key[.subkey...]``.  Resolution only goes through the
store's ``section``/``get``/``get_all``/``set_all`` methods and never touches
section files directly.
"""
from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .store import SectionStore

DotPath = tuple[str, ...]


def split_path(raw: str | DotPath) -> DotPath:
    if isinstance(raw, tuple):
        parts = raw
    else:
        parts = tuple(raw.split("."))
    if not parts or any(p == "" for p in parts):
        raise ValueError(f"Malformed path '{raw}'")
    return parts


def resolve(store: SectionStore, path: str | DotPath) -> Any:
    """Return the value at *path*, the section handle for a bare section
    name, or ``None`` when any segment is missing."""
    parts = split_path(path)
    if len(parts) == 1:
        return store.section(parts[0])
    value = store.get(parts[0], parts[1])
    for part in parts[2:]:
        if not isinstance(value, Mapping) or part not in value:
            return None
        value = value[part]
    return value


def assign(store: SectionStore, path: str | DotPath, value: Any) -> None:
    """Write *value* at *path*, creating intermediate mappings as needed.

    Intermediate values that are not mappings are replaced.
    """
    parts = split_path(path)
    if len(parts) == 1:
        if not isinstance(value, Mapping):
            raise TypeError(
                f"section '{parts[0]}' can only be replaced by a mapping, "
                f"not {type(value).__name__}"
            )
        store.set_all(parts[0], value)
        return
    config = store.get_all(parts[0])
    target: MutableMapping[str, Any] = config
    for part in parts[1:-1]:
        node = target.get(part)
        if not isinstance(node, MutableMapping):
            node = {}
            target[part] = node
        target = node
    target[parts[-1]] = value
    store.set_all(parts[0], config)
