"""Path based tree rendering.

A ``PathTree`` takes slash-delimited paths and nests them by shared prefix,
keeping first-insertion order at every level. ``build_tree_paths`` turns a
``ResolutionResult`` into the paths for the deployment tree.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Group, RenderableType
from rich.text import Text
from rich.tree import Tree

from deployment_tree.integrations.kubernetes.models.resolution import (
    ResolutionResult,
    ResourceCategory,
)

PATH_SEPARATOR = "/"

_Node = dict[str, "_Node"]


class PathTree:
    """Ordered prefix tree built from slash-delimited paths.

    Example:
        >>> tree = PathTree()
        >>> tree.add("Deployment: web/Service: ")
        >>> tree.add("Deployment: web/Service: /web-svc")
        >>> tree.roots()
        ['Deployment: web']
    """

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._root: _Node = {}
        for path in paths:
            self.add(path)

    def add(self, path: str) -> None:
        """Insert a path; existing prefixes are reused."""
        node = self._root
        for part in path.split(PATH_SEPARATOR):
            node = node.setdefault(part, {})

    def roots(self) -> list[str]:
        """Top-level labels in insertion order."""
        return list(self._root)

    def children(self, *path: str) -> list[str]:
        """Child labels below a path given as separate segments."""
        node = self._root
        for part in path:
            node = node[part]
        return list(node)

    def to_rich(self, *, guide_style: str = "dim") -> RenderableType:
        """Build a rich renderable; several roots render as a group of trees."""
        trees = []
        for label, children in self._root.items():
            tree = Tree(Text(label, style="bold"), guide_style=guide_style)
            _attach(tree, children)
            trees.append(tree)
        if len(trees) == 1:
            return trees[0]
        return Group(*trees)


def _attach(parent: Tree, node: _Node) -> None:
    for label, children in node.items():
        _attach(parent.add(Text(label)), children)


def _root_label(result: ResolutionResult) -> str:
    return f"Deployment: {result.deployment}"


def build_tree_paths(result: ResolutionResult) -> list[str]:
    """Build the ordered path list for a resolution result.

    Service and Replica Set get a header path plus one path for the resolved
    name. Every list category gets a header path, then each element is
    appended to the previous path, so later elements nest under earlier ones.
    """
    root = _root_label(result)
    paths: list[str] = []

    for category in ResourceCategory:
        header = f"{root}{PATH_SEPARATOR}{category.label}: "
        paths.append(header)

        if category.is_single:
            paths.extend(f"{header}{PATH_SEPARATOR}{name}" for name in result.names_for(category))
            continue

        current = header
        for name in result.names_for(category):
            current = f"{current}{PATH_SEPARATOR}{name}"
            paths.append(current)

    return paths


def build_tree(result: ResolutionResult) -> PathTree:
    """Build the deployment tree for a resolution result."""
    return PathTree(build_tree_paths(result))
