"""Module summaries extracted from Python source.

A summary keeps only what base-class resolution needs: the classes a module
declares and what each module-level name is bound to.
"""

import ast
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..errors import FileAnalysisError

_SKIPPED_BODIES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)


@dataclass
class ClassInfo:
    """Class statement found in a module."""

    qualname: str
    scope: str  # qualname of the enclosing class, "" at module level
    bases: list[ast.expr]
    line: int
    shadowed: Optional["Binding"] = None  # module binding the class name replaced


@dataclass
class Binding:
    """What a module-level name refers to.

    Kinds:
        class:  a class declared in the module (``target`` is its qualname)
        module: an imported module (``target`` is the module name)
        symbol: a name imported from a module (``target`` + ``attr``)
        alias:  assignment of another name (``expr``)
        value:  any other module-level assignment
    """

    kind: str
    target: str = ""
    attr: Optional[str] = None
    expr: Optional[ast.expr] = None


@dataclass
class ModuleSummary:
    """Classes and bindings of one Python module."""

    name: str
    path: Path
    is_package: bool = False
    classes: dict[str, ClassInfo] = field(default_factory=dict)
    bindings: dict[str, Binding] = field(default_factory=dict)
    star_imports: list[str] = field(default_factory=list)

    @property
    def package(self) -> str:
        """Return the package relative imports are resolved against."""
        if self.is_package:
            return self.name
        return self.name.rpartition(".")[0]


def package_base(directory: Path) -> Path:
    """Return the first ancestor of ``directory`` that is not a package."""
    while (directory / "__init__.py").is_file():
        directory = directory.parent
    return directory


def module_name_for(path: Path) -> str:
    """Derive the dotted module name of a source file from its packages."""
    parts = [] if path.stem == "__init__" else [path.stem]
    folder = path.parent
    while (folder / "__init__.py").is_file():
        parts.insert(0, folder.name)
        folder = folder.parent
    return ".".join(parts)


def parse_module(path: Path) -> ModuleSummary:
    """Parse a source file into a ModuleSummary.

    Raises:
        FileAnalysisError: If the file cannot be read or is not valid Python.
    """
    try:
        source = path.read_bytes()
        tree = ast.parse(source, filename=str(path))
    except OSError as e:
        raise FileAnalysisError(path, e.strerror or str(e)) from e
    except SyntaxError as e:
        raise FileAnalysisError(path, f"syntax error at line {e.lineno}: {e.msg}") from e
    except ValueError as e:
        raise FileAnalysisError(path, str(e)) from e

    summary = ModuleSummary(
        name=module_name_for(path),
        path=path,
        is_package=path.stem == "__init__",
    )
    _collect(summary, tree.body, scope="")
    return summary


def _collect(summary: ModuleSummary, body: list[ast.stmt], scope: str):
    for stmt in body:
        if isinstance(stmt, ast.ClassDef):
            qualname = f"{scope}.{stmt.name}" if scope else stmt.name
            summary.classes[qualname] = ClassInfo(
                qualname=qualname,
                scope=scope,
                bases=list(stmt.bases),
                line=stmt.lineno,
                shadowed=None if scope else summary.bindings.get(stmt.name),
            )
            if not scope:
                summary.bindings[stmt.name] = Binding("class", qualname)
            _collect(summary, stmt.body, qualname)
            continue

        if not scope:
            if isinstance(stmt, ast.Import):
                _bind_import(summary, stmt)
            elif isinstance(stmt, ast.ImportFrom):
                _bind_import_from(summary, stmt)
            elif isinstance(stmt, ast.Assign):
                for target in stmt.targets:
                    _bind_assignment(summary, target, stmt.value)
            elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
                _bind_assignment(summary, stmt.target, stmt.value)

        # if/try/with/for blocks execute in the enclosing scope
        if isinstance(stmt, _SKIPPED_BODIES):
            continue
        for attr in ("body", "orelse", "finalbody"):
            nested = getattr(stmt, attr, None)
            if isinstance(nested, list):
                _collect(summary, nested, scope)
        for handler in getattr(stmt, "handlers", []):
            _collect(summary, handler.body, scope)


def _bind_import(summary: ModuleSummary, stmt: ast.Import):
    for alias in stmt.names:
        if alias.asname:
            summary.bindings[alias.asname] = Binding("module", alias.name)
        else:
            head = alias.name.split(".", 1)[0]
            summary.bindings[head] = Binding("module", head)


def _bind_import_from(summary: ModuleSummary, stmt: ast.ImportFrom):
    module = _absolute_module(summary, stmt.module, stmt.level)
    for alias in stmt.names:
        if alias.name == "*":
            summary.star_imports.append(module)
        else:
            summary.bindings[alias.asname or alias.name] = Binding(
                "symbol", module, attr=alias.name
            )


def _absolute_module(summary: ModuleSummary, module: Optional[str], level: int) -> str:
    if level == 0:
        return module or ""
    package = summary.package.split(".") if summary.package else []
    if level > 1:
        package = package[: max(len(package) - (level - 1), 0)]
    return ".".join([*package, *([module] if module else [])])


def _bind_assignment(summary: ModuleSummary, target: ast.expr, value: ast.expr):
    if isinstance(target, ast.Name):
        if isinstance(value, (ast.Name, ast.Attribute, ast.Subscript)):
            summary.bindings[target.id] = Binding("alias", expr=value)
        else:
            summary.bindings[target.id] = Binding("value")
    elif isinstance(target, (ast.Tuple, ast.List)):
        for element in target.elts:
            if isinstance(element, ast.Name):
                summary.bindings[element.id] = Binding("value")
