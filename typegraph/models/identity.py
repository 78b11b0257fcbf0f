"""Type identity and node models."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class TypeIdentity:
    """Canonical identity of a declared type.

    Two identities compare equal whenever they denote the same class, no
    matter which import path or alias was used to reference it.
    """

    module: str
    qualname: str

    @property
    def fqn(self) -> str:
        """Return the fully qualified name, e.g. ``pkg.models.User``."""
        if not self.module:
            return self.qualname
        return f"{self.module}.{self.qualname}"

    def __str__(self) -> str:
        return self.fqn


OBJECT = TypeIdentity("builtins", "object")


@dataclass(frozen=True)
class TypeNode:
    """Type identity paired with the name shown in rendered graphs."""

    identity: TypeIdentity
    display_name: str

    @classmethod
    def of(cls, identity: TypeIdentity) -> "TypeNode":
        return cls(identity=identity, display_name=identity.qualname)
