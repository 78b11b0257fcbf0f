"""Base model provider interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, Sequence, TypeVar

from ..models import DeclaredType, TypeIdentity


class Context(ABC):
    """Semantic analysis scope shared by every file of one build.

    Attributes:
        root: Directory the context is anchored at.
        included: Input paths that fall under ``root``.
    """

    def __init__(self, root: Path, included: Sequence[Path]):
        self.root = root
        self.included = list(included)


C = TypeVar("C", bound=Context)


class ModelProvider(ABC, Generic[C]):
    """Base provider interface.

    A provider knows how to find an analysis context for a set of paths and
    how to list the types declared in one file together with their
    resolved supertypes.
    """

    extension: str = ""
    universal_root: TypeIdentity

    @abstractmethod
    def resolve_context(self, paths: Sequence[Path]) -> C:
        """Return the context for ``paths`` or raise ContextResolutionError."""
        pass

    @abstractmethod
    def declared_types_in(self, file: Path, context: C) -> list[DeclaredType]:
        """Return declared types of ``file`` or raise FileAnalysisError."""
        pass

    def prepare(self, context: C, files: Sequence[Path], exclude: Sequence[str] = ()):
        """Make ``context`` aware of every file of a run before analysis starts."""
        pass
