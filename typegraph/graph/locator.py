"""Source file discovery."""

import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Sequence

from ..errors import UnknownResourceError

logger = logging.getLogger(__name__)


def _is_excluded(path: Path, exclude: Sequence[str]) -> bool:
    return any(fnmatch(path.name, pattern) for pattern in exclude)


def locate_files(
    roots: Iterable[str | Path],
    extension: str = ".py",
    exclude: Sequence[str] = (),
) -> set[Path]:
    """Collect source files below the given roots.

    Args:
        roots: Files or directories to search.
        extension: Suffix a file must have to be included (e.g. ".py").
        exclude: fnmatch patterns for names skipped while walking directories.

    Returns:
        Set of absolute, resolved file paths.

    Raises:
        UnknownResourceError: If an entry is neither a file nor a directory.
    """
    files: set[Path] = set()
    folders: list[Path] = []
    visited: set[Path] = set()

    def add(path: Path):
        if path.is_file():
            if path.suffix == extension:
                files.add(path.resolve())
        elif path.is_dir():
            folders.append(path)
        else:
            raise UnknownResourceError(path)

    for root in roots:
        add(Path(root).absolute())

    while folders:
        folder = folders.pop()
        real = folder.resolve()
        if real in visited:
            continue
        visited.add(real)

        for child in folder.iterdir():
            if exclude and _is_excluded(child, exclude):
                logger.debug("Skipping excluded path %s", child)
                continue
            add(child)

    return files
