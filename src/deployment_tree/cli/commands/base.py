"""Shared Typer options and error handling for CLI commands."""

from __future__ import annotations

from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from deployment_tree.cli.output import OutputFormat
from deployment_tree.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesSelectorError,
    KubernetesTimeoutError,
    KubernetesValidationError,
)

# Shared console instances
console = Console()
err_console = Console(stderr=True)


# =============================================================================
# Common Typer Option Annotations
# =============================================================================


def _require_name(value: str) -> str:
    if not value.strip():
        raise typer.BadParameter("must not be empty")
    return value.strip()


DeploymentOption = Annotated[
    str,
    typer.Option(
        "--deployment",
        "-d",
        help="Name of the deployment to inspect",
        callback=_require_name,
        show_default=False,
    ),
]

NamespaceOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Kubernetes namespace of the deployment [default: default]",
        show_default=False,
    ),
]

KubeconfigOption = Annotated[
    str | None,
    typer.Option(
        "--kubeconfig",
        help="Path to the kubeconfig file [default: $HOME/.kube/config]",
        show_default=False,
    ),
]

ContextOption = Annotated[
    str | None,
    typer.Option(
        "--context",
        help="Kubeconfig context to use (defaults to the current context)",
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        help="Seconds to wait for all lookups before reporting them as timed out",
        min=0.1,
    ),
]

OutputOption = Annotated[
    OutputFormat | None,
    typer.Option(
        "--output",
        "-o",
        help="Output format: tree, json, or yaml [default: tree]",
        case_sensitive=False,
        show_default=False,
    ),
]


# =============================================================================
# Error Handling
# =============================================================================


def handle_k8s_error(error: KubernetesError) -> NoReturn:
    """Handle Kubernetes errors with user-friendly output.

    Args:
        error: The Kubernetes error to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    message = escape(error.message)

    if isinstance(error, KubernetesConnectionError):
        err_console.print("[red]Error:[/red] Cannot connect to Kubernetes cluster")
        err_console.print(f"  {message}")
        if error.original_error:
            err_console.print(f"  Cause: {escape(str(error.original_error))}")
        err_console.print(
            "\n[dim]Hint: Check that your kubeconfig is valid and the cluster is reachable.[/dim]"
        )

    elif isinstance(error, KubernetesAuthError):
        err_console.print("[red]Error:[/red] Authentication/authorization failed")
        err_console.print(f"  {message}")
        err_console.print("\n[dim]Hint: Check your credentials, token, or RBAC permissions.[/dim]")

    elif isinstance(error, KubernetesNotFoundError):
        err_console.print("[red]Error:[/red] Resource not found")
        err_console.print(f"  {message}")

    elif isinstance(error, KubernetesSelectorError):
        err_console.print("[red]Error:[/red] Deployment selector cannot be used")
        err_console.print(f"  {message}")

    elif isinstance(error, KubernetesValidationError):
        err_console.print("[red]Error:[/red] Validation failed")
        err_console.print(f"  {message}")
        if error.field_errors:
            err_console.print("\n  Field errors:")
            for field, err in error.field_errors.items():
                err_console.print(f"    - {escape(str(field))}: {escape(str(err))}")

    elif isinstance(error, KubernetesTimeoutError):
        err_console.print("[red]Error:[/red] Operation timed out")
        err_console.print(f"  {message}")
        err_console.print(
            "\n[dim]Hint: Try increasing the timeout with --timeout "
            "or DEPTREE_RESOLVE_TIMEOUT.[/dim]"
        )

    else:
        err_console.print(f"[red]Error:[/red] {message}")
        if error.status_code:
            err_console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(1)


def handle_config_error(error: ValidationError) -> NoReturn:
    """Report invalid configuration values and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    err_console.print("[red]Error:[/red] Invalid configuration")
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "config"
        err_console.print(f"  - {escape(location)}: {escape(detail['msg'])}")
    raise typer.Exit(1)
