"""Type model providers."""

from .base import Context, ModelProvider
from .context import PythonContext
from .python import ANCESTOR_MODES, PythonModelProvider, locate_context_roots

__all__ = [
    "Context",
    "ModelProvider",
    "PythonContext",
    "PythonModelProvider",
    "ANCESTOR_MODES",
    "locate_context_roots",
]
