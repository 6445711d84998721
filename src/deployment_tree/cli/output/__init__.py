"""CLI output utilities.

Usage:
    from deployment_tree.cli.output import OutputFormat, get_formatter

    get_formatter(OutputFormat.TREE).format_result(result)
"""

from deployment_tree.cli.output.formatters import OutputFormat, get_formatter
from deployment_tree.cli.output.tree import PathTree, build_tree, build_tree_paths

__all__ = ["OutputFormat", "PathTree", "build_tree", "build_tree_paths", "get_formatter"]
