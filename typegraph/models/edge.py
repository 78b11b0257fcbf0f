"""Supertype edge model."""

from dataclasses import dataclass

from .identity import TypeIdentity


@dataclass(frozen=True)
class SupertypeEdge:
    """Directed relation: ``type`` extends, mixes in or implements ``supertype``."""

    type: TypeIdentity
    supertype: TypeIdentity

    def __str__(self) -> str:
        return f"{self.type} -> {self.supertype}"
