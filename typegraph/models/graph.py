"""Type graph containers."""

from dataclasses import dataclass, field
from typing import Iterator

from .edge import SupertypeEdge
from .identity import TypeIdentity

# Display name -> display names of its supertypes
DisplayGraph = dict[str, list[str]]


@dataclass
class DeclaredType:
    """A class declared in an analysed file with its resolved supertypes."""

    identity: TypeIdentity
    supertypes: list[TypeIdentity] = field(default_factory=list)


class TypeGraph(dict[TypeIdentity, list[TypeIdentity]]):
    """Mapping from each declared type to its supertypes.

    Keys are only the types declared in analysed files. Supertypes may be
    external types that never appear as keys.
    """

    def edges(self) -> Iterator[SupertypeEdge]:
        """Iterate over all edges in key order."""
        for type_id, supertypes in self.items():
            for supertype in supertypes:
                yield SupertypeEdge(type_id, supertype)

    def nodes(self) -> list[TypeIdentity]:
        """Return every type in the graph, declared types first."""
        seen: dict[TypeIdentity, None] = dict.fromkeys(self)
        for supertypes in self.values():
            for supertype in supertypes:
                seen.setdefault(supertype, None)
        return list(seen)
