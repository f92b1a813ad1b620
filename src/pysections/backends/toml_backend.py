from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from ..errors import SectionLoadError, SectionSaveError
from . import register_backend
from .base import BaseBackend


@register_backend
class TomlBackend(BaseBackend):
    """TOML section file backend.

    TOML has no null, so sections holding ``None`` inside nested tables
    cannot be written.
    """

    suffixes = (".toml",)

    def loads(self, text: str) -> dict[str, Any]:
        try:
            doc = tomlkit.parse(text)
        except TOMLKitError as exc:
            raise SectionLoadError(str(exc)) from exc
        return doc.unwrap()

    def dumps(self, data: Mapping[str, Any]) -> str:
        try:
            return tomlkit.dumps(dict(data))
        except (TOMLKitError, TypeError, ValueError) as exc:
            raise SectionSaveError(str(exc)) from exc
