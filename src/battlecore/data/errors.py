"""Exceptions raised while loading content definitions."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a definition file is missing or is not valid JSON."""


class DataValidationError(DataError):
    """Raised when definition content has the wrong structure or types."""


class DataReferenceError(DataError):
    """Raised when a definition names an id that no other definition provides."""
