"""Console tree output for type hierarchies."""

from collections import defaultdict

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ..models import DisplayGraph
from .serializer import display_edges, display_nodes


def hierarchy_roots(display: DisplayGraph) -> list[str]:
    """Return nodes without supertypes (external or top-level types)."""
    return [node for node in display_nodes(display) if not display.get(node)]


def _count_tree_nodes(tree: Tree) -> int:
    return len(tree.children) + sum(_count_tree_nodes(child) for child in tree.children)


def print_hierarchy_tree(display: DisplayGraph, console: Console, title: str = "Types"):
    """Print the hierarchy as a tree, supertypes above their subtypes.

    Args:
        display: Display graph to print.
        console: Rich console for output.
        title: Label of the tree root.
    """
    children: dict[str, list[str]] = defaultdict(list)
    for supertype, subtype in display_edges(display):
        children[supertype].append(subtype)

    root = Tree(f"[bold]{escape(title)}[/bold]")

    def add_children(parent: Tree, name: str, path: frozenset[str]):
        for child in sorted(children.get(name, [])):
            if child in path:
                parent.add(f"{escape(child)} [dim](cycle)[/dim]")
                continue
            branch = parent.add(escape(child))
            add_children(branch, child, path | {child})

    for name in sorted(hierarchy_roots(display)):
        branch = root.add(f"[bold]{escape(name)}[/bold]")
        add_children(branch, name, frozenset({name}))

    console.print(root)
    console.print(f"[dim]{_count_tree_nodes(root)} entries[/dim]")
