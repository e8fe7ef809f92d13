"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Raised when settings cannot be used to build a component."""

    pass


class DependencyInjectionError(UtilError):
    """Raised when no provider implementation matches a component request."""

    pass
