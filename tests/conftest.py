"""Shared fixtures: small Python projects written to disk."""

import textwrap
from pathlib import Path
from typing import Callable

import pytest


PROJECT_FILES = {
    "pyproject.toml": """
        [project]
        name = "sample"
    """,
    "pkg/__init__.py": """
        from .base import Base
    """,
    "pkg/base.py": """
        from abc import ABC


        class Base(ABC):
            pass


        class Mixin:
            pass
    """,
    "pkg/models.py": """
        from typing import Generic, TypeVar

        from pkg import Base
        from . import base
        from .base import Mixin as M

        T = TypeVar("T")


        class Animal(Base):
            pass


        class Dog(Animal, M):
            pass


        class Box(Generic[T]):
            pass


        class Cat(base.Base):
            pass


        class Outer:
            class Inner:
                pass

            class Child(Inner):
                pass


        Alias = Animal


        class Puppy(Alias):
            pass


        class Plain:
            pass


        class Made(make_base()):
            pass
    """,
    "pkg/errors.py": """
        class AppError(Exception):
            pass


        class NotFound(AppError, LookupError):
            pass
    """,
    "pkg/notes.txt": "not python\n",
}


def _write(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"))
    return root


@pytest.fixture
def write_files(tmp_path) -> Callable[..., Path]:
    """Return a helper writing ``{relative path: source}`` below a directory."""

    def write(files: dict[str, str], root: Path | None = None) -> Path:
        return _write(root or tmp_path, files)

    return write


@pytest.fixture
def project(tmp_path) -> Path:
    """Sample project with a ``pkg`` package."""
    return _write(tmp_path / "project", PROJECT_FILES)
