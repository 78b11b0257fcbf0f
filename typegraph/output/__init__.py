"""Output formatting module."""

from .serializer import (
    FORMATS,
    display_edges,
    display_nodes,
    encode_graph,
    to_display_graph,
    to_dot,
    to_json,
)
from .sink import open_sink, write_graph
from .tree import hierarchy_roots, print_hierarchy_tree

__all__ = [
    "FORMATS",
    "display_edges",
    "display_nodes",
    "encode_graph",
    "to_display_graph",
    "to_dot",
    "to_json",
    "open_sink",
    "write_graph",
    "hierarchy_roots",
    "print_hierarchy_tree",
]
