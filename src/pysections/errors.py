class SectionsError(Exception):
    """Base class for pysections errors."""


class SectionLoadError(SectionsError):
    """Raised when a backend fails to parse a section file."""


class SectionSaveError(SectionsError):
    """Raised when a backend cannot serialize a section."""


class CacheBackendError(SectionsError):
    """Raised when the metadata cache cannot be read or written."""


class InvalidSectionNameError(SectionsError, ValueError):
    """Raised when a section name cannot be used as a file name."""
