"""Exception types raised by create-effect-app."""

from __future__ import annotations


class CreateAppError(Exception):
    """Base class for errors that abort project creation."""


class RepoSpecError(CreateAppError):
    """Raised when a GitHub repository spec cannot be parsed."""

    def __init__(self, spec: str, reason: str = "") -> None:
        self.spec = spec
        self.reason = reason
        message = f"Invalid GitHub repo spec: {spec}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class FetchError(CreateAppError):
    """Raised when a template or example cannot be downloaded or copied."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to download {source}: {reason}")


class ProjectNameError(CreateAppError):
    """Raised when the target project directory is invalid."""


class ManifestError(CreateAppError):
    """Raised when a project manifest cannot be read or understood."""
