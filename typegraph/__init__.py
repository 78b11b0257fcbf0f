"""typegraph - Build a graph of type inheritances in Python code."""

from .errors import (
    ConfigError,
    ContextResolutionError,
    FileAnalysisError,
    SinkWriteError,
    TypeGraphError,
    UnknownResourceError,
)
from .graph import TypeGraphBuilder, locate_files
from .models import OBJECT, TypeGraph, TypeIdentity
from .provider import PythonModelProvider

__version__ = "0.1.0"

__all__ = [
    "TypeGraphBuilder",
    "TypeGraph",
    "TypeIdentity",
    "OBJECT",
    "PythonModelProvider",
    "locate_files",
    "TypeGraphError",
    "ContextResolutionError",
    "FileAnalysisError",
    "UnknownResourceError",
    "SinkWriteError",
    "ConfigError",
]
