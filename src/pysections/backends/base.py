from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..errors import SectionLoadError


class BaseBackend(ABC):
    """Abstract section file backend.

    Subclasses only convert between text and a mapping; reading and
    writing files is shared.
    """

    suffixes: tuple[str, ...] = ()

    @property
    def suffix(self) -> str:
        return self.suffixes[0]

    @abstractmethod
    def loads(self, text: str) -> dict[str, Any]:
        pass

    @abstractmethod
    def dumps(self, data: Mapping[str, Any]) -> str:
        pass

    def load(self, path: Path) -> dict[str, Any]:
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SectionLoadError(f"{path} is not valid UTF-8: {exc}") from exc
        return self.loads(raw)

    def write(self, path: Path, text: str) -> None:
        with Path(path).open("w", encoding="utf-8") as fh:
            fh.write(text)

    def save(self, path: Path, data: Mapping[str, Any]) -> None:
        self.write(path, self.dumps(data))
