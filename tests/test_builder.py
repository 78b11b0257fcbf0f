"""Tests for type graph construction."""

import logging
import os
import threading
from pathlib import Path

import pytest

from typegraph.errors import ContextResolutionError, FileAnalysisError, UnknownResourceError
from typegraph.graph import TypeGraphBuilder, elide_universal_root
from typegraph.models import OBJECT, DeclaredType, TypeIdentity
from typegraph.provider import Context, ModelProvider

COMPARABLE = TypeIdentity("lib", "Comparable")
ANIMAL = TypeIdentity("pkg.models", "Animal")
DOG = TypeIdentity("pkg.models", "Dog")


class FakeProvider(ModelProvider[Context]):
    """Provider returning canned declarations per file name."""

    extension = ".py"
    universal_root = OBJECT

    def __init__(self, declarations: dict[str, list[DeclaredType]]):
        self.declarations = declarations
        self.threads: set[int] = set()

    def resolve_context(self, paths):
        if not paths:
            raise ContextResolutionError("no paths")
        return Context(Path(paths[0]), paths)

    def declared_types_in(self, file, context):
        self.threads.add(threading.get_ident())
        if file.name == "broken.py":
            raise FileAnalysisError(file, "cannot parse")
        return self.declarations.get(file.name, [])


class TestRootElision:
    def test_root_removed_when_other_supertypes(self):
        assert elide_universal_root([OBJECT, COMPARABLE], OBJECT) == [COMPARABLE]

    def test_sole_root_is_kept(self):
        assert elide_universal_root([OBJECT], OBJECT) == [OBJECT]

    def test_never_empty(self):
        assert elide_universal_root([OBJECT, OBJECT], OBJECT) == [OBJECT]

    def test_order_preserved(self):
        assert elide_universal_root([ANIMAL, OBJECT, COMPARABLE], OBJECT) == [ANIMAL, COMPARABLE]

    def test_no_supertypes(self):
        assert elide_universal_root([], OBJECT) == []


class TestBuildWithProvider:
    @pytest.fixture
    def files(self, write_files):
        return write_files({"a.py": "", "b.py": "", "broken.txt": ""})

    def test_elision_applied(self, files):
        provider = FakeProvider({
            "a.py": [DeclaredType(DOG, [OBJECT, COMPARABLE])],
            "b.py": [DeclaredType(ANIMAL, [OBJECT])],
        })
        graph = TypeGraphBuilder([files], provider=provider).build()
        assert graph == {DOG: [COMPARABLE], ANIMAL: [OBJECT]}

    def test_later_file_wins_on_duplicate(self, files, caplog):
        provider = FakeProvider({
            "a.py": [DeclaredType(DOG, [ANIMAL])],
            "b.py": [DeclaredType(DOG, [COMPARABLE])],
        })
        with caplog.at_level(logging.WARNING, logger="typegraph"):
            graph = TypeGraphBuilder([files], provider=provider).build()
        assert graph == {DOG: [COMPARABLE]}
        assert "declared more than once" in caplog.text

    def test_file_failure_aborts_build(self, files, write_files):
        write_files({"broken.py": ""}, root=files)
        provider = FakeProvider({"a.py": [DeclaredType(DOG, [ANIMAL])]})
        with pytest.raises(FileAnalysisError):
            TypeGraphBuilder([files], provider=provider).build()

    def test_no_files_gives_empty_graph(self, tmp_path):
        provider = FakeProvider({})
        assert TypeGraphBuilder([tmp_path], provider=provider).build() == {}

    def test_worker_pool_is_used(self, write_files):
        root = write_files({f"m{i}.py": "" for i in range(8)})
        provider = FakeProvider({})
        TypeGraphBuilder([root], provider=provider, workers=4).build()
        assert threading.get_ident() not in provider.threads


class TestBuildPythonProject:
    def test_keys_are_declared_types(self, project):
        graph = TypeGraphBuilder([project]).build()
        assert {t.qualname for t in graph} == {
            "Base", "Mixin",
            "Animal", "Dog", "Box", "Cat", "Outer", "Outer.Inner", "Outer.Child",
            "Puppy", "Plain", "Made",
            "AppError", "NotFound",
        }

    def test_external_supertypes_are_not_keys(self, project):
        graph = TypeGraphBuilder([project]).build()
        assert TypeIdentity("abc", "ABC") in graph.nodes()
        assert TypeIdentity("abc", "ABC") not in graph

    def test_standalone_type_keeps_root(self, project):
        graph = TypeGraphBuilder([project]).build()
        assert graph[TypeIdentity("pkg.models", "Plain")] == [OBJECT]

    def test_transitive_mode_elides_root(self, project):
        from typegraph.provider import PythonModelProvider

        builder = TypeGraphBuilder([project], provider=PythonModelProvider(ancestors="all"))
        graph = builder.build()
        assert OBJECT not in graph[DOG]
        assert graph[TypeIdentity("pkg.models", "Plain")] == [OBJECT]

    def test_subset_of_files(self, project):
        graph = TypeGraphBuilder([project / "pkg" / "errors.py"]).build()
        assert set(graph) == {
            TypeIdentity("pkg.errors", "AppError"),
            TypeIdentity("pkg.errors", "NotFound"),
        }

    def test_build_is_idempotent(self, project):
        builder = TypeGraphBuilder([project])
        first = builder.build()
        second = builder.build()
        assert set(first) == set(second)
        for key in first:
            assert set(first[key]) == set(second[key])

    def test_package_outside_search_roots(self, write_files, tmp_path):
        root = write_files({
            "pyproject.toml": "",
            "app.py": """
                from pkg import Base


                class App(Base):
                    pass
            """,
            "lib/pkg/__init__.py": "from .base import Base\n",
            "lib/pkg/base.py": "class Base:\n    pass\n",
        }, root=tmp_path / "layout")
        app = TypeIdentity("app", "App")
        base = TypeIdentity("pkg.base", "Base")

        builder = TypeGraphBuilder([root], workers=1)
        first = builder.build()
        second = builder.build()
        assert first[app] == [base]
        assert first[app][0] in first
        assert first == second

    def test_excluded_modules_are_not_followed(self, write_files, tmp_path):
        root = write_files({
            "pyproject.toml": "",
            "app.py": """
                from vendor.broken import Thing


                class App(Thing):
                    pass
            """,
            "vendor/__init__.py": "",
            "vendor/broken.py": "class (:\n",
        }, root=tmp_path / "layout")
        graph = TypeGraphBuilder([root], exclude=["vendor"]).build()
        assert graph == {TypeIdentity("app", "App"): [TypeIdentity("vendor.broken", "Thing")]}

    def test_separate_builders_agree(self, project):
        first = TypeGraphBuilder([project]).build()
        second = TypeGraphBuilder([project], workers=1).build()
        assert first == second

    def test_duplicate_module_names(self, write_files, tmp_path, caplog):
        write_files({
            "one/util.py": "class Helper:\n    pass\n",
            "two/util.py": "class Helper(dict):\n    pass\n",
        })
        with caplog.at_level(logging.WARNING, logger="typegraph"):
            graph = TypeGraphBuilder([tmp_path / "one", tmp_path / "two"]).build()
        assert list(graph) == [TypeIdentity("util", "Helper")]
        assert "declared more than once" in caplog.text


class TestBuildErrors:
    def test_no_paths(self):
        with pytest.raises(ContextResolutionError):
            TypeGraphBuilder([]).build()

    def test_syntax_error(self, project, write_files):
        write_files({"pkg/broken.py": "def broken(:\n"}, root=project)
        with pytest.raises(FileAnalysisError):
            TypeGraphBuilder([project]).build()

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not supported")
    def test_named_pipe_writes_nothing(self, tmp_path):
        fifo = tmp_path / "pipe"
        os.mkfifo(fifo)
        output = tmp_path / "out.gv"
        with pytest.raises(UnknownResourceError):
            TypeGraphBuilder([fifo]).write(output)
        assert not output.exists()


class TestGraphName:
    def test_default_name_from_included_paths(self, project):
        builder = TypeGraphBuilder([project / "pkg" / "models.py", project / "pkg" / "base.py"])
        assert builder.graph_name == "models, base"

    def test_explicit_name(self, project):
        assert TypeGraphBuilder([project], name="hierarchy").graph_name == "hierarchy"


class TestWrite:
    def test_writes_dot(self, project, tmp_path):
        output = tmp_path / "out.gv"
        TypeGraphBuilder([project / "pkg"]).write(output)
        lines = [line.strip() for line in output.read_text().splitlines()]
        assert lines[0].startswith("digraph pkg")
        assert "Animal -> Dog" in lines
        assert "Base -> Animal" in lines
        assert "object -> Plain" in lines

    def test_empty_graph_is_valid(self, tmp_path):
        source_dir = tmp_path / "empty"
        source_dir.mkdir()
        output = tmp_path / "out.gv"
        TypeGraphBuilder([source_dir]).write(output)
        text = output.read_text()
        assert text.startswith("digraph empty {")
        assert text.rstrip().endswith("}")
        assert "->" not in text

    def test_failed_build_writes_nothing(self, project, write_files, tmp_path):
        write_files({"pkg/broken.py": "class (:\n"}, root=project)
        output = tmp_path / "out.gv"
        with pytest.raises(FileAnalysisError):
            TypeGraphBuilder([project]).write(output)
        assert not output.exists()
