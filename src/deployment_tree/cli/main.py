"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer

from deployment_tree.cli.commands import tree

app = typer.Typer(
    name="deployment-tree",
    help="Show the resources directly related to a Kubernetes deployment.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command(
    name="tree",
    context_settings={"help_option_names": ["-h", "--help"]},
)(tree.tree)


if __name__ == "__main__":
    app()
