"""Constructor options for :class:`~pysections.store.SectionStore`."""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .paths import user_sections_dir
from .store import DEFAULT_EXTENSION

ENV_PREFIX = "PYSECTIONS_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

_ALIASES = {
    "initialConfig": "initial_config",
    "config": "initial_config",
    "useSharedCache": "use_shared_cache",
}


def _parse_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        v = val.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
        raise ValueError(f"not a boolean: {val!r}")
    return bool(val)


@dataclass
class StoreOptions:
    path: Path | None = None
    initial_config: dict[str, dict[str, Any]] = field(default_factory=dict)
    use_shared_cache: bool = False
    extension: str = DEFAULT_EXTENSION

    def __post_init__(self) -> None:
        if self.path is not None:
            self.path = Path(self.path).expanduser()
        if not self.extension.startswith("."):
            self.extension = f".{self.extension}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StoreOptions:
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in {"path", "initial_config", "use_shared_cache", "extension"}:
                raise ValueError(f"unknown store option {key!r}")
            kwargs[name] = value
        if "use_shared_cache" in kwargs:
            kwargs["use_shared_cache"] = _parse_bool(kwargs["use_shared_cache"])
        if kwargs.get("initial_config") is None:
            kwargs.pop("initial_config", None)
        return cls(**kwargs)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> StoreOptions:
        """Read ``<prefix>PATH``, ``<prefix>SHARED_CACHE`` and
        ``<prefix>EXTENSION`` from the environment."""
        data: dict[str, Any] = {}
        path = os.getenv(f"{prefix}PATH")
        if path:
            data["path"] = path
        shared = os.getenv(f"{prefix}SHARED_CACHE")
        if shared is not None:
            data["use_shared_cache"] = shared
        ext = os.getenv(f"{prefix}EXTENSION")
        if ext:
            data["extension"] = ext
        return cls.from_mapping(data)

    @classmethod
    def for_app(cls, app_name: str, **kwargs: Any) -> StoreOptions:
        return cls(path=user_sections_dir(app_name), **kwargs)
