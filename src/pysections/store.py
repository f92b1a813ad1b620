from __future__ import annotations

import copy
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from .backends import get_backend_for_suffix
from .dotpath import DotPath, assign, resolve
from .errors import (
    CacheBackendError,
    InvalidSectionNameError,
    SectionLoadError,
    SectionSaveError,
)
from .handle import SectionHandle
from .metadata_cache import (
    CacheEntry,
    FileMetadataCache,
    MetadataCache,
    SharedMetadataCache,
    directory_mtime,
)

if TYPE_CHECKING:
    from .options import StoreOptions

logger = logging.getLogger("pysections")

DEFAULT_EXTENSION = ".json"

SectionRef = str | SectionHandle

_UNSET: Any = object()
_BAD_NAME_RX = re.compile(r"[./\\]")


def _section_name(ref: SectionRef) -> str:
    return ref.name if isinstance(ref, SectionHandle) else ref


def _same(a: Any, b: Any) -> bool:
    return type(a) is type(b) and a == b


def _freeze(tree: Mapping[str, Mapping[str, Any]]) -> Mapping[str, Mapping[str, Any]]:
    return MappingProxyType(
        {name: MappingProxyType(copy.deepcopy(dict(values))) for name, values in tree.items()}
    )


class SectionStore:
    """Configuration split into named sections, each optionally backed by
    its own file under *path*.

    Sections are materialized lazily: the first access to a section creates
    its :class:`SectionHandle` and, for file-backed stores, loads the
    section's file unless the section was supplied in *config*.  A value is
    resolved from the section's explicit values first and from *defaults*
    second.  Nothing is written until :meth:`save` is called.

    Without a *path* the store lives in memory only and every load, save,
    delete and cache operation reports failure.
    """

    DEFAULTS: ClassVar[Mapping[str, Mapping[str, Any]]] = {}

    def __init__(
        self,
        path: str | Path | None = None,
        config: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        defaults: Mapping[str, Mapping[str, Any]] | None = None,
        use_shared_cache: bool = False,
        extension: str = DEFAULT_EXTENSION,
        handle_types: Mapping[str, type[SectionHandle]] | None = None,
        cache: MetadataCache | None = None,
    ) -> None:
        self._path = Path(path) if path is not None else None
        self._config: dict[str, dict[str, Any]] = {}
        if config:
            self.set_all(config)
        self._base_config = copy.deepcopy(self._config) if self._path is not None and config else None
        self._defaults = _freeze(self.DEFAULTS if defaults is None else defaults)
        self._handles: dict[str, SectionHandle] = {}
        self._handle_types = dict(handle_types or {})
        self._extension = extension if extension.startswith(".") else f".{extension}"
        self._backend = get_backend_for_suffix(self._extension)
        self.use_shared_cache = use_shared_cache
        self._custom_cache = cache
        self._cache: MetadataCache | None = None
        self._available: set[str] = set()
        self._refresh_available()

    @classmethod
    def from_options(
        cls,
        options: StoreOptions,
        *,
        defaults: Mapping[str, Mapping[str, Any]] | None = None,
        handle_types: Mapping[str, type[SectionHandle]] | None = None,
    ) -> SectionStore:
        return cls(
            options.path,
            options.initial_config,
            defaults=defaults,
            use_shared_cache=options.use_shared_cache,
            extension=options.extension,
            handle_types=handle_types,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self._path!r})"

    # ----- properties -----

    @property
    def path(self) -> Path | None:
        return self._path

    @path.setter
    def path(self, value: str | Path | None) -> None:
        self._path = Path(value) if value is not None else None
        self._refresh_available()

    @property
    def extension(self) -> str:
        return self._extension

    @property
    def defaults(self) -> Mapping[str, Mapping[str, Any]]:
        return self._defaults

    @property
    def base_config(self) -> dict[str, dict[str, Any]] | None:
        return copy.deepcopy(self._base_config)

    @property
    def available_files(self) -> frozenset[str]:
        return frozenset(self._available)

    @property
    def loaded_sections(self) -> list[str]:
        return list(self._handles)

    def is_loadable(self) -> bool:
        return self._path is not None

    # ----- sections -----

    def _check_name(self, name: str) -> str:
        if not isinstance(name, str) or not name or _BAD_NAME_RX.search(name):
            raise InvalidSectionNameError(f"invalid section name: {name!r}")
        return name

    def section(self, name: str) -> SectionHandle:
        """Return the handle for *name*, loading the section on first use."""
        handle = self._handles.get(name)
        if handle is None:
            self._check_name(name)
            handle_cls = self._handle_types.get(name, SectionHandle)
            handle = handle_cls(self, name)
            self._handles[name] = handle
            self._materialize(name)
        return handle

    def _materialize(self, name: str) -> None:
        if self.is_loadable() and name not in self._config:
            loaded = self.load(name)
            self._config[name] = loaded if loaded is not None else {}

    def __getitem__(self, name: str) -> SectionHandle:
        return self.section(name)

    def __setitem__(self, name: str, value: SectionHandle | Mapping[str, Any]) -> None:
        if isinstance(value, SectionHandle):
            if value.store is not self or value.name != name:
                raise ValueError(f"handle {value!r} does not belong to section {name!r}")
            self._handles[name] = value
            self._materialize(name)
        else:
            self.set_all(name, value)

    def __delitem__(self, name: str) -> None:
        self._config.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._config

    # ----- defaults -----

    def has_default(self, name: str, key: str) -> bool:
        return self._defaults.get(name, {}).get(key) is not None

    def get_default(self, name: str, key: str) -> Any:
        return copy.deepcopy(self._defaults.get(name, {}).get(key))

    def get_defaults(self, name: str) -> dict[str, Any]:
        return copy.deepcopy(dict(self._defaults.get(name, {})))

    # ----- values -----

    def has(self, name: str, key: str) -> bool:
        self.section(name)
        return key in self._config.get(name, {})

    def get(self, name: str, key: str) -> Any:
        self.section(name)
        values = self._config.get(name)
        if values is not None and key in values:
            return values[key]
        return self.get_default(name, key)

    def set(self, name: str, key: str, value: Any) -> None:
        self.section(name)
        self._config.setdefault(name, {})[key] = value

    def set_once(self, name: str, key: str, value: Any) -> None:
        self.section(name)
        self._config.setdefault(name, {}).setdefault(key, value)

    def remove(self, name: str, key: str) -> bool:
        """Drop the explicit value of *key*; defaults are untouched."""
        self.section(name)
        values = self._config.get(name)
        if values is not None and key in values:
            del values[key]
            return True
        return False

    def dot(self, path: str | DotPath, value: Any = _UNSET) -> Any:
        """Read (one argument) or write (two arguments) a dot path.

        ``store.dot("db")`` returns the section handle, ``store.dot("db.host")``
        the value and deeper paths descend into nested mappings.  Writing
        returns the store so calls can be chained.
        """
        if value is _UNSET:
            return resolve(self, path)
        assign(self, path, value)
        return self

    def get_all(self, name: str | None = None, include_defaults: bool = False) -> dict[str, Any]:
        """Return a copy of one section's explicit values, or of the whole
        tree when *name* is ``None``."""
        if name is None:
            names = list(self._config)
            if include_defaults:
                names += [n for n in self._defaults if n not in self._config]
            return {n: self._values_for(n, include_defaults) for n in names}
        self.section(name)
        return self._values_for(name, include_defaults)

    def _values_for(self, name: str, include_defaults: bool) -> dict[str, Any]:
        values = copy.deepcopy(self._config.get(name, {}))
        if include_defaults:
            for key, value in self.get_defaults(name).items():
                if key not in values and value is not None:
                    values[key] = value
        return values

    def set_all(
        self,
        name: str | Mapping[str, Mapping[str, Any]],
        config: Mapping[str, Any] | None = None,
    ) -> None:
        """Replace one section's values, or the whole tree when *name* is a
        mapping."""
        if isinstance(name, Mapping):
            self._config = {
                self._check_name(s): dict(copy.deepcopy(values)) for s, values in name.items()
            }
            return
        self._check_name(name)
        self._config[name] = dict(copy.deepcopy(config or {}))

    def get_keys(self, name: str, include_defaults: bool = False) -> list[str]:
        self.section(name)
        keys = list(self._config.get(name, {}))
        if include_defaults:
            keys += [k for k in self._defaults.get(name, {}) if k not in keys]
        return keys

    def is_empty(self, name: str | None = None) -> bool:
        if name is None:
            return not self._config
        self.section(name)
        return not self._config.get(name)

    def clear(self, name: SectionRef) -> bool:
        name = _section_name(name)
        if name in self._config:
            self._config[name] = {}
            return True
        return False

    def each(
        self,
        name: str,
        visitor: Callable[[str, Any], object],
        include_defaults: bool = False,
    ) -> None:
        """Call ``visitor(key, value)`` for each explicit value, then for each
        default without an explicit value.  A truthy return stops iteration.
        """
        self.section(name)
        values = self._config.get(name, {})
        for key, value in list(values.items()):
            if visitor(key, value):
                return
        if include_defaults:
            for key, value in self.get_defaults(name).items():
                if key in values:
                    continue
                if visitor(key, value):
                    return

    # ----- persistence -----

    def generate_path(self, name: str) -> Path | None:
        if self._path is None:
            return None
        self._check_name(name)
        return self._path / f"{name}{self._extension}"

    def load(self, name: SectionRef) -> dict[str, Any] | None:
        """Read a section's file; ``None`` when there is none or it is
        unreadable."""
        if not self.is_loadable():
            return None
        name = _section_name(name)
        if name not in self._available:
            return None
        path = self.generate_path(name)
        try:
            data = self._backend.load(path)
        except SectionLoadError as exc:
            logger.warning("Failed to parse section %s from %s: %s", name, path, exc)
            return None
        except OSError as exc:
            logger.warning("Failed to read section %s from %s: %s", name, path, exc)
            return None
        logger.debug("Loaded section %s from %s", name, path)
        return data

    def save(self, name: SectionRef | None = None) -> bool:
        """Write a section's values to its file, or every loaded section
        when *name* is ``None``.

        ``None`` values and values equal to their default are left out; a
        section with nothing left has its file removed instead.
        """
        if not self.is_loadable():
            return False

        if name is None:
            success = False
            for handle in list(self._handles.values()):
                if handle.save():
                    success = True
            return success

        name = _section_name(name)
        path = self.generate_path(name)
        defaults = self.get_defaults(name)
        config = {
            key: value
            for key, value in self.get_all(name).items()
            if value is not None and not (key in defaults and _same(defaults[key], value))
        }
        if not config:
            return self.delete_file(name)

        try:
            text = self._backend.dumps(config)
        except SectionSaveError as exc:
            logger.warning("Failed to serialize section %s: %s", name, exc)
            return False

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._backend.write(path, text)
        except OSError as exc:
            logger.warning("Failed to save section %s to %s: %s", name, path, exc)
            success = False
        else:
            logger.debug("Saved section %s to %s", name, path)
            success = True

        self._on_updated(name)
        return success

    def delete_file(self, name: SectionRef) -> bool:
        """Remove a section's file.  True when no file remains."""
        if not self.is_loadable():
            return False
        name = _section_name(name)
        path = self.generate_path(name)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to delete section file %s: %s", path, exc)
        self._on_updated(name)
        return not path.exists()

    def eject(self, target: SectionRef | Iterable[SectionRef]) -> None:
        """Forget sections held in memory; their files are left alone."""
        if isinstance(target, (str, SectionHandle)):
            name = _section_name(target)
            self._config.pop(name, None)
            self._handles.pop(name, None)
            return
        for item in target:
            self.eject(item)

    def eject_all(self, keep: Iterable[SectionRef] | None = None) -> None:
        names = {_section_name(k) for k in keep} if keep else set()
        self._handles = {n: h for n, h in self._handles.items() if n in names}
        self._config = {n: v for n, v in self._config.items() if n in names}

    def _on_updated(self, name: str) -> None:
        logger.debug("Section file %s changed, refreshing metadata cache", name)
        self.update_cache()

    # ----- metadata cache -----

    def _make_cache(self) -> MetadataCache | None:
        if self._path is None:
            return None
        if self._custom_cache is not None:
            return self._custom_cache
        if self.use_shared_cache:
            return SharedMetadataCache.for_directory(self._path)
        return FileMetadataCache(self._path)

    def _refresh_available(self) -> None:
        self._available = set()
        self._cache = self._make_cache()
        if self._cache is None or not self._path.is_dir():
            return
        try:
            entry = self._cache.get()
        except CacheBackendError as exc:
            logger.warning("Metadata cache %s unavailable: %s", self._cache.name, exc)
            entry = None
        if entry is not None and entry.is_fresh(directory_mtime(self._path)):
            self._available = set(entry.available_files)
            return
        logger.debug("Metadata cache for %s missing or stale", self._path)
        self.update_cache()

    def _scan(self) -> set[str]:
        if self._path is None or not self._path.is_dir():
            return set()
        ext = self._extension
        try:
            return {
                p.name[: -len(ext)]
                for p in self._path.iterdir()
                if p.name.endswith(ext) and len(p.name) > len(ext) and p.is_file()
            }
        except OSError as exc:
            logger.warning("Failed to scan %s: %s", self._path, exc)
            return set()

    @property
    def cache_name(self) -> str | None:
        return self._cache.name if self._cache is not None else None

    def has_cache(self) -> bool:
        return self._cache is not None and self._cache.exists()

    def get_cache(self) -> CacheEntry | None:
        if self._cache is None:
            return None
        try:
            return self._cache.get()
        except CacheBackendError as exc:
            logger.warning("Metadata cache %s unavailable: %s", self._cache.name, exc)
            return None

    def update_cache(self) -> bool:
        """Rescan the base directory and store the result in the cache."""
        if self._cache is None:
            return False
        self._available = self._scan()
        try:
            self._cache.prepare()
            return self._cache.put(self._available, directory_mtime(self._path))
        except CacheBackendError as exc:
            logger.warning("Failed to update metadata cache %s: %s", self._cache.name, exc)
            return False

    def delete_cache(self) -> bool:
        if self._cache is None:
            return False
        return self._cache.invalidate()
