"""Tests for main CLI module."""

from __future__ import annotations

import json
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
import typer
import yaml
from kubernetes.client import ApiException
from typer.testing import CliRunner

from deployment_tree import __version__
from deployment_tree.integrations.kubernetes.exceptions import KubernetesConnectionError
from tests.factories import deployment, replica_set_list, service_list, web_deployment


@pytest.fixture
def web_cluster(mock_k8s_client: MagicMock) -> Iterator[MagicMock]:
    """Patch the CLI's client with a cluster holding the ``web`` Deployment."""
    mock_k8s_client.__enter__.return_value = mock_k8s_client
    mock_k8s_client.apps_v1.read_namespaced_deployment.return_value = web_deployment()
    mock_k8s_client.core_v1.list_namespaced_service.return_value = service_list("web-svc")
    mock_k8s_client.apps_v1.list_namespaced_replica_set.return_value = replica_set_list(
        "web-7f9c"
    )
    with patch(
        "deployment_tree.cli.commands.tree.KubernetesClient", return_value=mock_k8s_client
    ) as client_class:
        mock_k8s_client.client_class = client_class
        yield mock_k8s_client


class TestCLIMain:
    """Test main CLI entry point."""

    @pytest.mark.unit
    def test_help_option(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        """Test -h displays help text."""
        result = cli_runner.invoke(cli_app, ["-h"])

        assert result.exit_code == 0
        assert "--deployment" in result.output
        assert "--namespace" in result.output

    @pytest.mark.unit
    def test_version_option(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        """Test --version displays version without requiring a deployment."""
        result = cli_runner.invoke(cli_app, ["--version"])

        assert result.exit_code == 0
        assert f"deployment-tree version {__version__}" in result.output

    @pytest.mark.unit
    def test_deployment_is_required(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        """Test a missing -d is a usage error."""
        result = cli_runner.invoke(cli_app, ["-n", "shop"])

        assert result.exit_code == 2
        assert "Missing option" in result.output

    @pytest.mark.unit
    def test_blank_deployment_is_rejected(
        self, cli_runner: CliRunner, cli_app: typer.Typer
    ) -> None:
        """Test an empty deployment name is a usage error."""
        result = cli_runner.invoke(cli_app, ["-d", "  "])

        assert result.exit_code == 2

    @pytest.mark.unit
    def test_timeout_must_be_positive(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        """Test --timeout below the minimum is a usage error."""
        result = cli_runner.invoke(cli_app, ["-d", "web", "--timeout", "0"])

        assert result.exit_code == 2


class TestTreeCommand:
    """Test resolving and printing a deployment tree."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_prints_tree(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test the tree lists every category under the deployment."""
        result = cli_runner.invoke(cli_app, ["-d", "web"])

        assert result.exit_code == 0, result.output
        labels = [line.strip(" │├└─") for line in result.stdout.splitlines()]
        assert labels == [
            "Deployment: web",
            "Service:",
            "web-svc",
            "Replica Set:",
            "web-7f9c",
            "Config Maps:",
            "web-cfg",
            "web-vol-cfg",
            "Secrets:",
            "web-sec",
            "Volumes:",
        ]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_flags_reach_the_client(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test namespace, kubeconfig and context flags build the client config."""
        result = cli_runner.invoke(
            cli_app,
            ["-d", "web", "-n", "shop", "--kubeconfig", "/tmp/kubeconfig", "--context", "dev"],
        )

        assert result.exit_code == 0, result.output
        (config,) = web_cluster.client_class.call_args.args
        assert config.namespace == "shop"
        assert config.kubeconfig == "/tmp/kubeconfig"
        assert config.context == "dev"
        call = web_cluster.apps_v1.read_namespaced_deployment.call_args
        assert call.kwargs["namespace"] == "shop"
        assert call.kwargs["name"] == "web"

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_environment_defaults(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test DEPTREE_* variables fill in flags that were not given."""
        result = cli_runner.invoke(
            cli_app,
            ["-d", "web"],
            env={"DEPTREE_NAMESPACE": "payments", "DEPTREE_OUTPUT": "json"},
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["namespace"] == "payments"

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_json_output(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test -o json prints the result as JSON."""
        result = cli_runner.invoke(cli_app, ["-d", "web", "-o", "json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "deployment": "web",
            "namespace": "default",
            "service": "web-svc",
            "replica_set": "web-7f9c",
            "config_maps": ["web-cfg", "web-vol-cfg"],
            "secrets": ["web-sec"],
            "volumes": [],
            "errors": {},
        }

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_yaml_output_is_case_insensitive(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test --output YAML prints the result as YAML."""
        result = cli_runner.invoke(cli_app, ["-d", "web", "--output", "YAML"])

        assert result.exit_code == 0, result.output
        data = yaml.safe_load(result.stdout)
        assert data["secrets"] == ["web-sec"]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_no_matches_prints_headers_only(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test categories with nothing resolved still show their heading."""
        web_cluster.apps_v1.read_namespaced_deployment.return_value = deployment("bare")
        web_cluster.core_v1.list_namespaced_service.return_value = service_list()
        web_cluster.apps_v1.list_namespaced_replica_set.return_value = replica_set_list()

        result = cli_runner.invoke(cli_app, ["-d", "bare"])

        assert result.exit_code == 0, result.output
        labels = [line.strip(" │├└─") for line in result.stdout.splitlines()]
        assert labels == [
            "Deployment: bare",
            "Service:",
            "Replica Set:",
            "Config Maps:",
            "Secrets:",
            "Volumes:",
        ]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_degraded_category_warns_and_succeeds(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test a failed listing is reported as a warning, not an error."""
        web_cluster.core_v1.list_namespaced_service.side_effect = ApiException(
            status=500, reason="Internal Server Error"
        )

        result = cli_runner.invoke(cli_app, ["-d", "web"])

        assert result.exit_code == 0, result.output
        assert "Service could not be resolved" in result.output
        assert "web-7f9c" in result.output


class TestTreeCommandErrors:
    """Test fatal errors and their exit codes."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_deployment_not_found(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test a missing deployment exits 1 with a clear message."""
        web_cluster.apps_v1.read_namespaced_deployment.side_effect = ApiException(
            status=404, reason="Not Found"
        )

        result = cli_runner.invoke(cli_app, ["-d", "missing"])

        assert result.exit_code == 1
        assert "Resource not found" in result.output
        assert "Deployment 'missing' not found in namespace 'default'" in result.output

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_missing_selector(
        self, cli_runner: CliRunner, cli_app: typer.Typer, web_cluster: MagicMock
    ) -> None:
        """Test a deployment without a selector exits 1."""
        web_cluster.apps_v1.read_namespaced_deployment.return_value = deployment(
            "web", selector=None
        )

        result = cli_runner.invoke(cli_app, ["-d", "web"])

        assert result.exit_code == 1
        assert "Deployment selector cannot be used" in result.output
        web_cluster.core_v1.list_namespaced_service.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_cannot_load_configuration(
        self, cli_runner: CliRunner, cli_app: typer.Typer
    ) -> None:
        """Test a client that cannot load any configuration exits 1."""
        with patch(
            "deployment_tree.cli.commands.tree.KubernetesClient",
            side_effect=KubernetesConnectionError("Cannot load Kubernetes configuration."),
        ):
            result = cli_runner.invoke(cli_app, ["-d", "web"])

        assert result.exit_code == 1
        assert "Cannot connect to Kubernetes cluster" in result.output

    @pytest.mark.unit
    def test_invalid_environment_value(
        self, cli_runner: CliRunner, cli_app: typer.Typer
    ) -> None:
        """Test an invalid DEPTREE_* value exits 1 before contacting the cluster."""
        with patch("deployment_tree.cli.commands.tree.KubernetesClient") as client_class:
            result = cli_runner.invoke(
                cli_app, ["-d", "web"], env={"DEPTREE_REQUEST_TIMEOUT": "soon"}
            )

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "request_timeout" in result.output
        client_class.assert_not_called()
