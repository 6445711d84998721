"""Output formatters for resolution results.

Implements the Strategy pattern for output formatting, allowing the result to
be rendered as a tree, JSON, or YAML.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from enum import StrEnum

import yaml
from rich.console import Console
from rich.markup import escape

from deployment_tree.cli.output.tree import build_tree
from deployment_tree.integrations.kubernetes.models.resolution import (
    ResolutionResult,
    ResourceCategory,
)


class OutputFormat(StrEnum):
    """Supported output formats."""

    TREE = "tree"
    JSON = "json"
    YAML = "yaml"


class ResultFormatter(ABC):
    """Abstract base class for resolution result formatters."""

    def __init__(self, console: Console, err_console: Console | None = None) -> None:
        self.console = console
        self.err_console = err_console or Console(stderr=True)

    @abstractmethod
    def format_result(self, result: ResolutionResult) -> None:
        """Format and display a resolution result."""

    def format_warnings(self, result: ResolutionResult) -> None:
        """Report degraded categories on stderr."""
        for category in ResourceCategory:
            if error := result.errors.get(str(category)):
                self.err_console.print(
                    f"[yellow]Warning:[/yellow] {category.label} could not be resolved: "
                    f"{escape(error)}",
                    highlight=False,
                )


class TreeFormatter(ResultFormatter):
    """Indented tree output rooted at the deployment name."""

    def format_result(self, result: ResolutionResult) -> None:
        self.console.print(build_tree(result).to_rich())
        self.format_warnings(result)


class JsonFormatter(ResultFormatter):
    """JSON output formatter."""

    def format_result(self, result: ResolutionResult) -> None:
        self.console.print(
            json.dumps(result.model_dump(), indent=2, default=str),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        self.format_warnings(result)


class YamlFormatter(ResultFormatter):
    """YAML output formatter."""

    def format_result(self, result: ResolutionResult) -> None:
        self.console.print(
            yaml.dump(result.model_dump(), default_flow_style=False, sort_keys=False),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        self.format_warnings(result)


def get_formatter(
    format_type: OutputFormat,
    console: Console | None = None,
    err_console: Console | None = None,
) -> ResultFormatter:
    """Factory function to get the appropriate formatter."""
    if console is None:
        console = Console()

    formatters: dict[OutputFormat, type[ResultFormatter]] = {
        OutputFormat.TREE: TreeFormatter,
        OutputFormat.JSON: JsonFormatter,
        OutputFormat.YAML: YamlFormatter,
    }

    formatter_class = formatters.get(format_type, TreeFormatter)
    return formatter_class(console, err_console)
