from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .store import SectionStore


class SectionHandle:
    """View of one section of a :class:`~pysections.store.SectionStore`.

    The handle holds no values itself; every call goes back to the store so
    that reads always reflect the store's current state.  Subclass it to give
    a section typed properties::

        class Database(SectionHandle):
            @property
            def host(self) -> str:
                return self.get("host")
    """

    def __init__(self, store: SectionStore, name: str) -> None:
        self._store = store
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> SectionStore:
        return self._store

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"

    # ----- key access -----

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._store.has(self._name, key)

    def __getitem__(self, key: str) -> Any:
        return self._store.get(self._name, key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._store.set(self._name, key, value)

    def __delitem__(self, key: str) -> None:
        self._store.remove(self._name, key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._store.get_keys(self._name))

    def has(self, key: str) -> bool:
        return self._store.has(self._name, key)

    def get(self, key: str) -> Any:
        return self._store.get(self._name, key)

    def set(self, key: str, value: Any) -> None:
        self._store.set(self._name, key, value)

    def set_once(self, key: str, value: Any) -> None:
        self._store.set_once(self._name, key, value)

    def remove(self, key: str) -> bool:
        return self._store.remove(self._name, key)

    # ----- defaults -----

    def has_default(self, key: str) -> bool:
        return self._store.has_default(self._name, key)

    def get_default(self, key: str) -> Any:
        return self._store.get_default(self._name, key)

    def get_defaults(self) -> dict[str, Any]:
        return self._store.get_defaults(self._name)

    # ----- bulk access -----

    def get_keys(self, include_defaults: bool = False) -> list[str]:
        return self._store.get_keys(self._name, include_defaults)

    def is_empty(self) -> bool:
        return self._store.is_empty(self._name)

    def get_all(self, include_defaults: bool = False) -> dict[str, Any]:
        return self._store.get_all(self._name, include_defaults)

    def set_all(self, config: Mapping[str, Any]) -> None:
        self._store.set_all(self._name, config)

    def each(
        self,
        visitor: Callable[[str, Any], object],
        include_defaults: bool = False,
    ) -> None:
        self._store.each(self._name, visitor, include_defaults)

    # ----- persistence -----

    def load(self) -> dict[str, Any] | None:
        return self._store.load(self._name)

    def save(self) -> bool:
        return self._store.save(self._name)

    def clear(self) -> bool:
        return self._store.clear(self._name)

    def delete(self) -> bool:
        """Remove this section's file."""
        return self._store.delete_file(self._name)

    def eject(self) -> None:
        self._store.eject(self._name)
