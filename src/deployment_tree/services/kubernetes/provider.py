"""Kubernetes resource provider.

Point lookups and label-selector listings used to resolve a Deployment's
related resources. Every call goes through the client's retry decorator and
carries a request timeout, and API failures are translated into
``KubernetesError`` subclasses.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from deployment_tree.integrations.kubernetes.exceptions import KubernetesTimeoutError
from deployment_tree.integrations.kubernetes.models.base import _safe_get
from deployment_tree.services.kubernetes.base import ClusterService
from deployment_tree.services.kubernetes.selectors import selector_to_string

if TYPE_CHECKING:
    from kubernetes.client import V1Deployment, V1ReplicaSet, V1Service


class KubernetesResourceProvider(ClusterService):
    """Read-only access to Deployments, Services and ReplicaSets.

    The listings accept a ``cancel`` event and a ``time.monotonic()``
    ``deadline``. No attempt starts once either has passed, and a request
    never waits longer than the time left before the deadline.
    """

    _entity_name = "resource_provider"

    def _request(
        self,
        call: Callable[..., Any],
        kind: str,
        name: str | None,
        namespace: str,
        *,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
        **kwargs: Any,
    ) -> Any:
        """Run one API call with retries, timeout and error translation."""

        @self._client.make_retry_decorator(cancel)
        def _attempt() -> Any:
            remaining = self._remaining(deadline)
            if (cancel is not None and cancel.is_set()) or remaining == 0:
                raise KubernetesTimeoutError(f"{kind} request abandoned")

            timeout = self._client.timeout
            if remaining is not None:
                timeout = min(timeout, remaining)
            try:
                return call(namespace=namespace, _request_timeout=timeout, **kwargs)
            except Exception as e:
                raise self._client.translate_api_exception(e, kind, name, namespace) from e

        return _attempt()

    def get_deployment(self, name: str, namespace: str | None = None) -> V1Deployment:
        """Get a single deployment by name.

        Args:
            name: Deployment name.
            namespace: Target namespace (uses default if None).

        Returns:
            The raw ``V1Deployment`` object.

        Raises:
            KubernetesNotFoundError: If the deployment does not exist.
            KubernetesError: On any other API failure.
        """
        ns = self._namespace(namespace)
        self._log.debug("getting_deployment", name=name, namespace=ns)
        deployment: V1Deployment = self._request(
            self._client.apps_v1.read_namespaced_deployment, "Deployment", name, ns, name=name
        )
        return deployment

    def list_services(
        self,
        namespace: str | None,
        label_selector: str,
        *,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
    ) -> list[V1Service]:
        """List services matching a label selector, in API order."""
        ns = self._namespace(namespace)
        self._log.debug("listing_services", namespace=ns, label_selector=label_selector)
        result = self._request(
            self._client.core_v1.list_namespaced_service,
            "Service",
            None,
            ns,
            cancel=cancel,
            deadline=deadline,
            label_selector=label_selector,
        )
        services: list[V1Service] = list(_safe_get(result, "items", default=[]))
        self._log.debug("listed_services", count=len(services))
        return services

    def list_replica_sets(
        self,
        namespace: str | None,
        label_selector: str,
        *,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
    ) -> list[V1ReplicaSet]:
        """List replica sets matching a label selector, in API order."""
        ns = self._namespace(namespace)
        self._log.debug("listing_replica_sets", namespace=ns, label_selector=label_selector)
        result = self._request(
            self._client.apps_v1.list_namespaced_replica_set,
            "ReplicaSet",
            None,
            ns,
            cancel=cancel,
            deadline=deadline,
            label_selector=label_selector,
        )
        replica_sets: list[V1ReplicaSet] = list(_safe_get(result, "items", default=[]))
        self._log.debug("listed_replica_sets", count=len(replica_sets))
        return replica_sets

    @staticmethod
    def derive_selector(deployment: Any) -> str:
        """Derive the label selector string from a deployment's pod selector.

        Raises:
            KubernetesSelectorError: If the selector is missing or malformed.
        """
        return selector_to_string(_safe_get(deployment, "spec", "selector"))
