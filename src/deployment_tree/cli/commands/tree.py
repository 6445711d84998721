"""Deployment tree command."""

from __future__ import annotations

from typing import Annotated

import typer
from pydantic import ValidationError

from deployment_tree import __version__
from deployment_tree.cli.commands.base import (
    ContextOption,
    DeploymentOption,
    KubeconfigOption,
    NamespaceOption,
    OutputOption,
    TimeoutOption,
    console,
    err_console,
    handle_config_error,
    handle_k8s_error,
)
from deployment_tree.cli.output import OutputFormat, get_formatter
from deployment_tree.integrations.kubernetes.client import KubernetesClient
from deployment_tree.integrations.kubernetes.config import KubernetesConfig
from deployment_tree.integrations.kubernetes.exceptions import KubernetesError
from deployment_tree.logging import configure_logging, get_logger
from deployment_tree.services.kubernetes import DeploymentResolver

logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"deployment-tree version {__version__}")
        raise typer.Exit()


def tree(
    deployment: DeploymentOption,
    namespace: NamespaceOption = None,
    kubeconfig: KubeconfigOption = None,
    context: ContextOption = None,
    timeout: TimeoutOption = None,
    output: OutputOption = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose output.")
    ] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug mode.")] = False,
    json_logs: Annotated[
        bool, typer.Option("--json-logs", help="Write console logs as JSON.")
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Show the resources directly related to a deployment.

    Prints the deployment's Service, current ReplicaSet, and the ConfigMaps,
    Secrets and Volumes referenced by its pod template.

    Examples:
        deployment-tree -d web
        deployment-tree -d web -n shop --output yaml
        kubectl deployment_tree -d web
    """
    configure_logging(verbose=verbose, debug=debug, json_output=json_logs)

    try:
        config = KubernetesConfig.from_env(
            {
                "kubeconfig": kubeconfig,
                "context": context,
                "namespace": namespace,
                "resolve_timeout": timeout,
                "output_format": output.value if output else None,
            }
        )
    except ValidationError as e:
        handle_config_error(e)

    logger.debug(
        "starting_resolution",
        deployment=deployment,
        namespace=config.namespace,
        kubeconfig=config.kubeconfig,
        context=config.context,
    )

    try:
        with KubernetesClient(config) as client:
            resolver = DeploymentResolver(client, resolve_timeout=config.resolve_timeout)
            result = resolver.resolve(deployment, config.namespace)
    except KubernetesError as e:
        logger.debug("resolution_failed", error=str(e))
        handle_k8s_error(e)

    formatter = get_formatter(OutputFormat(config.output_format), console, err_console)
    formatter.format_result(result)
