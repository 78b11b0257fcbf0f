"""Model provider for Python sources.

Resolves class bases through imports, aliases and nested class scopes so
that the same class always maps to the same TypeIdentity, whichever module
or import path referenced it.
"""

import ast
import builtins
import logging
from collections import deque
from pathlib import Path
from typing import Optional, Sequence

from ..errors import ContextResolutionError
from ..models import OBJECT, DeclaredType, TypeIdentity
from .base import ModelProvider
from .context import PythonContext
from .summary import Binding, ClassInfo, ModuleSummary, package_base

logger = logging.getLogger(__name__)

PROJECT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg")
ANCESTOR_MODES = ("direct", "all")
BUILTIN_NAMES = frozenset(dir(builtins))


def _dotted_parts(expr: ast.expr) -> Optional[list[str]]:
    """Flatten ``a.b.C`` (or ``a.b.C[T]``) into ``["a", "b", "C"]``."""
    if isinstance(expr, ast.Subscript):
        return _dotted_parts(expr.value)
    if isinstance(expr, ast.Name):
        return [expr.id]
    if isinstance(expr, ast.Attribute):
        head = _dotted_parts(expr.value)
        if head is None:
            return None
        return head + [expr.attr]
    return None


def _context_root_for(path: Path) -> Path:
    start = path if path.is_dir() else path.parent
    for candidate in (start, *start.parents):
        if any((candidate / marker).is_file() for marker in PROJECT_MARKERS):
            return candidate
    return package_base(start)


def locate_context_roots(paths: Sequence[str | Path]) -> list[Path]:
    """Find context roots for the given paths, in input order.

    A root is the nearest directory with a project marker file, or the
    directory above the outermost package when there is none.
    """
    roots: list[Path] = []
    for path in paths:
        path = Path(path).absolute()
        if not path.exists():
            continue
        root = _context_root_for(path)
        if root not in roots:
            roots.append(root)
    return roots


class PythonModelProvider(ModelProvider[PythonContext]):
    """Extract classes and their resolved bases from ``.py`` files."""

    extension = ".py"
    universal_root = OBJECT

    def __init__(self, ancestors: str = "direct"):
        if ancestors not in ANCESTOR_MODES:
            raise ValueError(f"Unknown ancestor mode: {ancestors}")
        self.ancestors = ancestors

    def resolve_context(self, paths: Sequence[Path]) -> PythonContext:
        roots = locate_context_roots(paths)
        if not roots:
            raise ContextResolutionError("Unable to locate context root for paths")

        logger.debug("Found %d roots, using first root", len(roots))
        root = roots[0]

        absolute = [Path(p).absolute() for p in paths]
        included = [p for p in absolute if p == root or root in p.parents]

        search_paths = [root]
        if (root / "src").is_dir():
            search_paths.append(root / "src")
        for path in included:
            search_paths.append(package_base(path if path.is_dir() else path.parent))

        return PythonContext(root, included, search_paths)

    def prepare(self, context: PythonContext, files: Sequence[Path], exclude: Sequence[str] = ()):
        context.register_files(files, exclude)

    def declared_types_in(self, file: Path, context: PythonContext) -> list[DeclaredType]:
        summary = context.load_file(file)
        logger.debug("Processing file %s", file)

        declared = []
        for info in summary.classes.values():
            identity = TypeIdentity(summary.name, info.qualname)
            logger.debug("Found class %s at line %d", identity, info.line)

            supertypes = self._bases_of(summary, info, context)
            if self.ancestors == "all":
                supertypes = self._ancestors_of(supertypes, context)
            declared.append(DeclaredType(identity, supertypes))
        return declared

    def _bases_of(
        self, summary: ModuleSummary, info: ClassInfo, context: PythonContext
    ) -> list[TypeIdentity]:
        bases: list[TypeIdentity] = []
        for expr in info.bases:
            parts = _dotted_parts(expr)
            if parts is None:
                logger.debug(
                    "Skipping unsupported base %s of %s.%s",
                    ast.unparse(expr), summary.name, info.qualname,
                )
                continue

            # Bases are evaluated before the class name is bound
            head = parts[0]
            if not info.scope and head == info.qualname:
                identity = None
                if info.shadowed is not None:
                    identity = self._follow(summary, info.shadowed, parts, context, set())
            else:
                scope = info.scope
                if scope and f"{scope}.{head}" == info.qualname:
                    scope = ""
                identity = self._resolve_name(summary, parts, scope, context, set())

            if identity is None:
                logger.debug(
                    "Unable to resolve base %s of %s.%s",
                    ".".join(parts), summary.name, info.qualname,
                )
            elif identity not in bases:
                bases.append(identity)

        return bases or [OBJECT]

    def _ancestors_of(
        self, direct: list[TypeIdentity], context: PythonContext
    ) -> list[TypeIdentity]:
        """Flatten the full ancestor set breadth-first, ``object`` last."""
        ancestors: dict[TypeIdentity, None] = {}
        queue = deque(direct)
        while queue:
            current = queue.popleft()
            if current in ancestors or current == OBJECT:
                continue
            ancestors[current] = None
            queue.extend(self._supertypes_of(current, context))
        return [*ancestors, OBJECT]

    def _supertypes_of(self, identity: TypeIdentity, context: PythonContext) -> list[TypeIdentity]:
        summary = context.find_module(identity.module)
        if summary is None:
            return []
        info = summary.classes.get(identity.qualname)
        if info is None:
            return []
        return self._bases_of(summary, info, context)

    def _resolve_name(
        self,
        summary: ModuleSummary,
        parts: list[str],
        scope: str,
        context: PythonContext,
        seen: set[tuple[str, str]],
    ) -> Optional[TypeIdentity]:
        head, rest = parts[0], parts[1:]

        # Class bodies only see names of the class body they execute in
        if scope and f"{scope}.{head}" in summary.classes:
            return TypeIdentity(summary.name, ".".join([f"{scope}.{head}", *rest]))

        binding = summary.bindings.get(head)
        if binding is not None:
            return self._follow(summary, binding, parts, context, seen)

        for module_name in summary.star_imports:
            key = (module_name, "*")
            if key in seen:
                continue
            seen.add(key)
            star = context.find_module(module_name)
            if star is not None and (head in star.bindings or star.star_imports):
                identity = self._resolve_name(star, parts, "", context, seen)
                if identity is not None:
                    return identity

        if head in BUILTIN_NAMES:
            return TypeIdentity("builtins", ".".join(parts))
        return None

    def _follow(
        self,
        summary: ModuleSummary,
        binding: Binding,
        parts: list[str],
        context: PythonContext,
        seen: set[tuple[str, str]],
    ) -> Optional[TypeIdentity]:
        head, rest = parts[0], parts[1:]
        key = (summary.name, head)
        if key in seen:
            return None
        seen.add(key)

        if binding.kind == "class":
            return TypeIdentity(summary.name, ".".join([binding.target, *rest]))
        if binding.kind == "module":
            return self._resolve_in_module(binding.target, rest, context, seen)
        if binding.kind == "symbol":
            return self._resolve_in_module(binding.target, [binding.attr, *rest], context, seen)
        if binding.kind == "alias":
            target = _dotted_parts(binding.expr)
            if target is not None:
                return self._resolve_name(summary, target + rest, "", context, seen)
        return TypeIdentity(summary.name, ".".join(parts))

    def _resolve_in_module(
        self,
        module: str,
        parts: list[str],
        context: PythonContext,
        seen: set[tuple[str, str]],
    ) -> Optional[TypeIdentity]:
        while parts:
            submodule = f"{module}.{parts[0]}" if module else parts[0]
            if context.find_module(submodule) is None:
                break
            module, parts = submodule, parts[1:]

        # A bare module is not a type
        if not parts:
            return None

        summary = context.find_module(module)
        if summary is None:
            # Outside the context: the last segment names the type
            path = [module, *parts] if module else parts
            return TypeIdentity(".".join(path[:-1]), path[-1])

        identity = self._resolve_name(summary, parts, "", context, seen)
        if identity is None:
            return TypeIdentity(summary.name, ".".join(parts))
        return identity
