"""Type graph construction across a set of source files."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence

from ..models import DeclaredType, DisplayGraph, TypeGraph, TypeIdentity
from ..output import encode_graph, to_display_graph, write_graph
from ..output.sink import Destination
from ..provider import Context, ModelProvider, PythonModelProvider
from .locator import locate_files

logger = logging.getLogger(__name__)


def elide_universal_root(
    supertypes: Sequence[TypeIdentity], root: TypeIdentity
) -> list[TypeIdentity]:
    """Drop the universal root when a type has other supertypes.

    A type whose only supertype is the root keeps it, so standalone types
    stay attached to the root in rendered graphs.
    """
    if len(supertypes) <= 1:
        return list(supertypes)
    filtered = [t for t in supertypes if t != root]
    return filtered or [root]


class TypeGraphBuilder:
    """Build the type hierarchy of a set of source files and directories.

    - ``build`` returns the TypeGraph (declared type -> supertypes).
    - ``display_graph`` and ``write`` render it for visualization.

    The analysis context is resolved once per builder and shared by all
    analysis tasks.
    """

    def __init__(
        self,
        paths: Sequence[str | Path],
        provider: Optional[ModelProvider] = None,
        name: Optional[str] = None,
        workers: Optional[int] = None,
        exclude: Sequence[str] = (),
    ):
        """Initialize the builder.

        Args:
            paths: Files or directories to analyse.
            provider: Model provider (default: PythonModelProvider).
            name: Graph name in the output; derived from the context if None.
            workers: Maximum analysis threads (default: executor default).
            exclude: fnmatch patterns skipped while walking directories and
                resolving imports.
        """
        self.paths = [Path(p) for p in paths]
        self.provider = provider or PythonModelProvider()
        self.workers = workers
        self.exclude = tuple(exclude)
        self._name = name
        self._context: Optional[Context] = None
        self._graph = TypeGraph()
        self._files: list[Path] = []

    @property
    def context(self) -> Context:
        """Analysis context, resolved on first access.

        Raises:
            ContextResolutionError: If no context root exists for the paths.
        """
        if self._context is None:
            self._context = self.provider.resolve_context(self.paths)
        return self._context

    @property
    def graph_name(self) -> str:
        if self._name is not None:
            return self._name
        return ", ".join(p.stem for p in self.context.included)

    def build(self) -> TypeGraph:
        """Create the type graph for the configured paths.

        Raises:
            UnknownResourceError: If a path is neither a file nor a directory.
            ContextResolutionError: If no context can be resolved.
            FileAnalysisError: If any file fails to analyse.
        """
        self._locate_files()
        context = self.context

        self._graph.clear()
        self.provider.prepare(context, self._files, self.exclude)
        results = self._analyze(context)

        root = self.provider.universal_root
        for file, declared_types in zip(self._files, results):
            for declared in declared_types:
                if declared.identity in self._graph:
                    logger.warning(
                        "Type %s declared more than once, keeping the one in %s",
                        declared.identity, file,
                    )
                self._graph[declared.identity] = elide_universal_root(declared.supertypes, root)

        logger.info("Done building graph with %d types found", len(self._graph))
        return TypeGraph(self._graph)

    def display_graph(self) -> DisplayGraph:
        """Build the graph and convert it to display names."""
        return to_display_graph(self.build())

    def write(self, destination: Destination, fmt: str = "dot") -> None:
        """Build the graph and write it to ``destination`` in ``fmt``.

        The destination is opened only after the graph is built, so a
        failed build leaves no output behind.
        """
        display = self.display_graph()
        chunks = encode_graph(display, self.graph_name, fmt)

        logger.info("Writing graph to %s...", getattr(destination, "name", destination))
        write_graph(chunks, destination)
        logger.info("Done writing graph to %s", getattr(destination, "name", destination))

    def _locate_files(self):
        logger.debug("Locating files to be analysed")
        files = locate_files(self.paths, self.provider.extension, self.exclude)
        self._files = sorted(files)
        logger.info("Found %d %s files to analyze", len(self._files), self.provider.extension)

    def _analyze(self, context: Context) -> list[list[DeclaredType]]:
        """Analyse every file concurrently and gather results in file order."""
        if not self._files:
            return []

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [
                executor.submit(self.provider.declared_types_in, file, context)
                for file in self._files
            ]
            try:
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise
