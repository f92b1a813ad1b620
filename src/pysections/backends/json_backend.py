from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ..errors import SectionLoadError, SectionSaveError
from . import register_backend
from .base import BaseBackend


@register_backend
class JsonBackend(BaseBackend):
    """JSON section file backend."""

    suffixes = (".json",)

    def loads(self, text: str) -> dict[str, Any]:
        if text.strip() == "":
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SectionLoadError(str(exc)) from exc
        if not isinstance(data, dict):
            raise SectionLoadError("Root of a JSON section must be an object")
        return data

    def dumps(self, data: Mapping[str, Any]) -> str:
        try:
            return json.dumps(dict(data), indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            raise SectionSaveError(str(exc)) from exc
