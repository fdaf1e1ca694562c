from __future__ import annotations


class FSSelectorError(Exception):
    """Base class for every error raised by fsselector."""


class ConfigurationError(FSSelectorError, ValueError):
    """Raised before any interaction when the prompt options are unusable."""


class DirectoryReadError(FSSelectorError, OSError):
    """A directory could not be listed."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"Cannot read directory: '{path}'"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
