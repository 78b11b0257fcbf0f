"""Analysis context for Python sources."""

import logging
import threading
from fnmatch import fnmatch
from pathlib import Path
from typing import Optional, Sequence

from .base import Context
from .summary import ModuleSummary, module_name_for, package_base, parse_module

logger = logging.getLogger(__name__)


def _is_excluded(candidate: Path, base: Path, exclude: Sequence[str]) -> bool:
    parts = candidate.relative_to(base).parts
    return any(fnmatch(part, pattern) for part in parts for pattern in exclude)


class PythonContext(Context):
    """Module lookup and summary cache shared across analysis tasks.

    Summaries are parsed at most once per module name. The cache is
    guarded by a lock so worker threads can share one context; parsing
    itself runs outside the lock.
    """

    def __init__(self, root: Path, included: Sequence[Path], search_paths: Sequence[Path]):
        super().__init__(root, included)
        self._initial_paths: list[Path] = list(dict.fromkeys(search_paths))
        self._search_paths: list[Path] = list(self._initial_paths)
        self._sources: dict[str, Path] = {}
        self._exclude: tuple[str, ...] = ()
        self._modules: dict[str, ModuleSummary] = {}
        self._missing: set[str] = set()
        self._lock = threading.Lock()

    @property
    def search_paths(self) -> tuple[Path, ...]:
        with self._lock:
            return tuple(self._search_paths)

    def register_files(self, files: Sequence[Path], exclude: Sequence[str] = ()):
        """Start an analysis run over ``files``.

        The package base of every file becomes a search path, and each
        file is bound to its module name, before any lookup happens.
        Cached summaries from earlier runs are dropped.

        Args:
            files: Files of the run, in analysis order.
            exclude: fnmatch patterns; modules below matching names are
                treated as outside the context.
        """
        search_paths = list(self._initial_paths)
        sources: dict[str, Path] = {}
        for path in files:
            base = package_base(path.parent)
            if base not in search_paths:
                search_paths.append(base)
            sources.setdefault(module_name_for(path), path)

        with self._lock:
            self._search_paths = search_paths
            self._sources = sources
            self._exclude = tuple(exclude)
            self._modules.clear()
            self._missing.clear()

    def load_file(self, path: Path) -> ModuleSummary:
        """Return the summary for an analysed file, parsing it if needed."""
        name = module_name_for(path)
        with self._lock:
            cached = self._modules.get(name)
        if cached is not None and cached.path == path:
            return cached

        summary = parse_module(path)
        with self._lock:
            # Only the file bound to the module name may fill the cache
            if self._sources.get(name, path) == path:
                return self._modules.setdefault(name, summary)
        return summary

    def find_module(self, name: str) -> Optional[ModuleSummary]:
        """Return the summary of module ``name`` if its source is in the context."""
        if not name:
            return None
        with self._lock:
            if name in self._modules:
                return self._modules[name]
            if name in self._missing:
                return None
            path = self._sources.get(name)
            search_paths = list(self._search_paths)
            exclude = self._exclude

        if path is None:
            path = self._find_module_file(name, search_paths, exclude)
        if path is None:
            with self._lock:
                self._missing.add(name)
            return None

        logger.debug("Loading module %s from %s", name, path)
        summary = parse_module(path)
        with self._lock:
            return self._modules.setdefault(name, summary)

    @staticmethod
    def _find_module_file(
        name: str, search_paths: list[Path], exclude: Sequence[str]
    ) -> Optional[Path]:
        parts = name.split(".")
        for base in search_paths:
            package_dir = base.joinpath(*parts)
            candidates = (package_dir / "__init__.py", package_dir.parent / f"{parts[-1]}.py")
            for candidate in candidates:
                if not candidate.is_file():
                    continue
                if exclude and _is_excluded(candidate, base, exclude):
                    logger.debug("Skipping excluded module %s at %s", name, candidate)
                    continue
                return candidate
        return None
