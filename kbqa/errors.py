"""kbqa.errors

Central error types to keep error handling consistent.

No-match outcomes are not errors; they show up as absent entries in the ranked result.
"""


class AppError(Exception):
    """Base application error."""


class ConfigError(AppError):
    """Raised when required configuration is missing or invalid."""


class CatalogError(AppError):
    """Raised when the template catalog cannot be read or is malformed."""
