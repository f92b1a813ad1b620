from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import yaml

from ..errors import SectionLoadError, SectionSaveError
from . import register_backend
from .base import BaseBackend


@register_backend
class YamlBackend(BaseBackend):
    """YAML section file backend."""

    suffixes = (".yaml", ".yml")

    def loads(self, text: str) -> dict[str, Any]:
        if text.strip() == "":
            return {}
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SectionLoadError(str(exc)) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SectionLoadError("Root of a YAML section must be a mapping")
        return data

    def dumps(self, data: Mapping[str, Any]) -> str:
        try:
            return yaml.safe_dump(dict(data), sort_keys=False, allow_unicode=True)
        except yaml.YAMLError as exc:
            raise SectionSaveError(str(exc)) from exc
