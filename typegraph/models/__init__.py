"""Data models for typegraph."""

from .identity import OBJECT, TypeIdentity, TypeNode
from .edge import SupertypeEdge
from .graph import DeclaredType, DisplayGraph, TypeGraph

__all__ = [
    "OBJECT",
    "TypeIdentity",
    "TypeNode",
    "SupertypeEdge",
    "DeclaredType",
    "DisplayGraph",
    "TypeGraph",
]
