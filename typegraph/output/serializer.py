"""Serialization of type graphs to Graphviz DOT and JSON.

Edges are drawn from each supertype to the type extending it, so rendered
hierarchies read top-down.
"""

from typing import Iterator, Optional

import graphviz
import msgspec

from ..models import DisplayGraph, TypeGraph, TypeNode

FORMATS = ("dot", "json")


class EdgeRecord(msgspec.Struct):
    """Edge in JSON output (supertype -> subtype)."""

    source: str
    target: str


class GraphDocument(msgspec.Struct, omit_defaults=True):
    """JSON graph document."""

    nodes: list[str] = []
    edges: list[EdgeRecord] = []
    name: Optional[str] = None


_json_encoder = msgspec.json.Encoder()


def to_display_graph(graph: TypeGraph) -> DisplayGraph:
    """Convert a type graph to a name-keyed display graph.

    Types sharing a display name collapse into one node whose supertypes
    are the union of theirs.
    """
    display: DisplayGraph = {}
    for type_id in graph:
        display.setdefault(TypeNode.of(type_id).display_name, [])

    for edge in graph.edges():
        parents = display[TypeNode.of(edge.type).display_name]
        name = TypeNode.of(edge.supertype).display_name
        if name not in parents:
            parents.append(name)
    return display


def display_nodes(display: DisplayGraph) -> list[str]:
    """Return every node name once: declared types first, then supertypes."""
    nodes: dict[str, None] = dict.fromkeys(display)
    for parents in display.values():
        for parent in parents:
            nodes.setdefault(parent, None)
    return list(nodes)


def display_edges(display: DisplayGraph) -> Iterator[tuple[str, str]]:
    """Yield ``(supertype, subtype)`` pairs."""
    for subtype, supertypes in display.items():
        for supertype in supertypes:
            yield supertype, subtype


def to_dot(display: DisplayGraph, name: Optional[str] = None) -> graphviz.Digraph:
    """Build a Graphviz digraph with node statements followed by edges."""
    dot = graphviz.Digraph(name=name or None)
    for node in display_nodes(display):
        dot.node(node)
    for start, end in display_edges(display):
        dot.edge(start, end)
    return dot


def to_json(display: DisplayGraph, name: Optional[str] = None) -> bytes:
    """Encode the display graph as a JSON document."""
    document = GraphDocument(
        nodes=display_nodes(display),
        edges=[EdgeRecord(source=s, target=t) for s, t in display_edges(display)],
        name=name or None,
    )
    return _json_encoder.encode(document)


def encode_graph(
    display: DisplayGraph, name: Optional[str] = None, fmt: str = "dot"
) -> Iterator[bytes]:
    """Return an iterator of encoded chunks for the requested format.

    Raises:
        ValueError: If ``fmt`` is not a supported format.
    """
    if fmt == "dot":
        return (line.encode("utf-8") for line in to_dot(display, name))
    if fmt == "json":
        return iter([to_json(display, name) + b"\n"])
    raise ValueError(f"Unknown output format: {fmt} (expected one of {', '.join(FORMATS)})")
