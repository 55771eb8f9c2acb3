"""Exception types raised by liscaf."""

from __future__ import annotations


class ScaffoldError(RuntimeError):
    """Base class for fatal scaffolding failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(ScaffoldError):
    """Raised when the run is misconfigured; nothing has been mutated yet."""


class ManifestError(ConfigurationError):
    """Raised when a template manifest cannot be read."""


class ExternalToolError(ScaffoldError):
    """Raised when an external tool (git) is missing or fails."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


__all__ = [
    "ConfigurationError",
    "ExternalToolError",
    "ManifestError",
    "ScaffoldError",
]
