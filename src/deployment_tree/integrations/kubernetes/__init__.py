"""Kubernetes integration - API client and configuration models."""

from deployment_tree.integrations.kubernetes.client import KubernetesClient
from deployment_tree.integrations.kubernetes.config import KubernetesConfig
from deployment_tree.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesSelectorError,
    KubernetesTimeoutError,
    KubernetesValidationError,
)

__all__ = [
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConfig",
    "KubernetesConnectionError",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesSelectorError",
    "KubernetesTimeoutError",
    "KubernetesValidationError",
]
