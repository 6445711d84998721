"""Kubernetes service module.

Resolves the resources associated with a Deployment.
"""

from deployment_tree.services.kubernetes.provider import KubernetesResourceProvider
from deployment_tree.services.kubernetes.references import iter_references
from deployment_tree.services.kubernetes.resolver import DeploymentResolver
from deployment_tree.services.kubernetes.selectors import selector_to_string

__all__ = [
    "DeploymentResolver",
    "KubernetesResourceProvider",
    "iter_references",
    "selector_to_string",
]
