"""Shared pytest fixtures for deployment_tree tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import typer
from typer.testing import CliRunner

from deployment_tree.cli.main import app
from deployment_tree.integrations.kubernetes.client import KubernetesClient


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("DEPTREE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep file logs written during tests out of the real home directory."""
    log_dir = tmp_path / "logs"
    monkeypatch.setattr("deployment_tree.logging.config.LOG_DIR", log_dir)
    monkeypatch.setattr("deployment_tree.logging.config.LOG_FILE", log_dir / "deployment-tree.log")
    return log_dir


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None]:
    """Remove handlers added by configure_logging after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers


@pytest.fixture
def mock_k8s_client() -> MagicMock:
    """Create a mock Kubernetes client.

    The retry decorator is an identity function so API calls run exactly once,
    and API errors go through the real translation.
    """
    mock_client = MagicMock()
    mock_client.default_namespace = "default"
    mock_client.timeout = 30
    mock_client.make_retry_decorator.return_value = lambda fn: fn
    mock_client.translate_api_exception.side_effect = KubernetesClient.translate_api_exception
    return mock_client
