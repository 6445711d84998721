"""Entry point for `python -m deployment_tree`."""

from deployment_tree.cli.main import app

app()
