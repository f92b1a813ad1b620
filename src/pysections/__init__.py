from .errors import (
    CacheBackendError,
    InvalidSectionNameError,
    SectionLoadError,
    SectionSaveError,
    SectionsError,
)
from .handle import SectionHandle
from .metadata_cache import CacheEntry, FileMetadataCache, MetadataCache, SharedMetadataCache
from .options import StoreOptions
from .paths import user_sections_dir
from .store import SectionStore


__all__ = [
    "CacheBackendError",
    "CacheEntry",
    "FileMetadataCache",
    "InvalidSectionNameError",
    "MetadataCache",
    "SectionHandle",
    "SectionLoadError",
    "SectionSaveError",
    "SectionStore",
    "SectionsError",
    "SharedMetadataCache",
    "StoreOptions",
    "user_sections_dir",
]
