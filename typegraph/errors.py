"""Error types raised while building a type graph."""

from pathlib import Path
from typing import Optional


class TypeGraphError(Exception):
    """Base class for all typegraph failures."""


class ContextResolutionError(TypeGraphError):
    """No analysis context root could be found for the given paths."""


class FileAnalysisError(TypeGraphError):
    """A source file could not be read or parsed."""

    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Unable to analyse {self.path}: {reason}")


class UnknownResourceError(TypeGraphError):
    """A path is neither a regular file nor a directory."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(f"Unknown resource type for {self.path}")


class SinkWriteError(TypeGraphError):
    """The output destination could not be opened, written or closed."""

    def __init__(self, destination: str, reason: Optional[str] = None):
        self.destination = destination
        message = f"Unable to write graph to {destination}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigError(TypeGraphError):
    """A configuration file is missing or invalid."""
