"""Graph module for locating sources and building type graphs."""

from .builder import TypeGraphBuilder, elide_universal_root
from .locator import locate_files

__all__ = [
    "TypeGraphBuilder",
    "elide_universal_root",
    "locate_files",
]
