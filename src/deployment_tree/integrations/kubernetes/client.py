"""Kubernetes API client wrapper.

Loads a kubeconfig (or the in-cluster service account), hands out the two API
groups the resolver needs, retries transient connection failures, and maps
client exceptions onto ``deployment_tree`` errors.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    stop_when_event_set,
    wait_exponential,
)
from urllib3.exceptions import HTTPError as TransportError

from deployment_tree.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)

if TYPE_CHECKING:
    from kubernetes.client import AppsV1Api, CoreV1Api

    from deployment_tree.integrations.kubernetes.config import KubernetesConfig

logger = structlog.get_logger()

_UNAVAILABLE_STATUSES = frozenset({502, 503, 504})


class KubernetesClient:
    """Connection to one cluster.

    Example:
        ```python
        config = KubernetesConfig.from_env()
        with KubernetesClient(config) as client:
            client.apps_v1.read_namespaced_deployment("web", "default")
        ```
    """

    def __init__(self, config: KubernetesConfig) -> None:
        """Load cluster configuration.

        Raises:
            KubernetesConnectionError: If neither the kubeconfig nor an
                in-cluster configuration can be loaded.
        """
        self._config = config
        self._core_v1: CoreV1Api | None = None
        self._apps_v1: AppsV1Api | None = None
        self._source = self._load_config()

        logger.info(
            "kubernetes_client_ready",
            source=self._source,
            default_namespace=config.namespace,
        )

    def _load_config(self) -> str:
        """Load configuration and return where it came from."""
        from kubernetes import config
        from kubernetes.config import ConfigException

        try:
            config.load_kube_config(
                config_file=self._config.kubeconfig,
                context=self._config.context,
            )
        except ConfigException as kube_error:
            logger.debug("kubeconfig_unavailable", error=str(kube_error))
            try:
                config.load_incluster_config()
            except ConfigException as e:
                raise KubernetesConnectionError(
                    message=f"Cannot load Kubernetes configuration: {kube_error}; "
                    "no in-cluster service account either",
                    original_error=kube_error,
                ) from e
            return "in-cluster"

        return self._config.context or "current-context"

    @property
    def core_v1(self) -> CoreV1Api:
        """CoreV1Api (Services)."""
        if self._core_v1 is None:
            from kubernetes.client import CoreV1Api

            self._core_v1 = CoreV1Api()
        return self._core_v1

    @property
    def apps_v1(self) -> AppsV1Api:
        """AppsV1Api (Deployments, ReplicaSets)."""
        if self._apps_v1 is None:
            from kubernetes.client import AppsV1Api

            self._apps_v1 = AppsV1Api()
        return self._apps_v1

    @property
    def default_namespace(self) -> str:
        return self._config.namespace

    @property
    def timeout(self) -> int:
        """Per request timeout in seconds."""
        return self._config.request_timeout

    @staticmethod
    def translate_api_exception(
        e: BaseException,
        kind: str | None = None,
        name: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesError:
        """Map an exception from the kubernetes client onto a ``KubernetesError``.

        Transport failures (refused connections, read timeouts) and 502/503/504
        become ``KubernetesConnectionError`` so the retry decorator picks them
        up. ``kind``, ``name`` and ``namespace`` only shape the not-found
        message.
        """
        from kubernetes.client import ApiException

        if isinstance(e, KubernetesError):
            return e

        if isinstance(e, TransportError | OSError):
            return KubernetesConnectionError(
                message=f"Kubernetes API unreachable: {e}",
                original_error=e,
            )

        if not isinstance(e, ApiException):
            return KubernetesError(str(e))

        status = e.status
        reason = e.reason or f"Kubernetes API error: {status}"

        if status in (401, 403):
            return KubernetesAuthError(reason, status_code=status)
        if status == 404:
            return KubernetesNotFoundError(kind or "Resource", name, namespace)
        if status in (400, 422):
            return KubernetesValidationError(reason, status_code=status)
        if status in _UNAVAILABLE_STATUSES:
            return KubernetesConnectionError(message=reason, original_error=e)
        return KubernetesError(reason, status_code=status)

    def make_retry_decorator(self, cancel: threading.Event | None = None) -> Any:
        """Build a tenacity decorator that retries connection errors.

        Args:
            cancel: When given, no further attempt is made once it is set.
        """
        options: dict[str, Any] = {
            "retry": retry_if_exception_type(KubernetesConnectionError),
            "stop": stop_after_attempt(self._config.retry_attempts),
            "wait": wait_exponential(multiplier=1, min=1, max=10),
            "reraise": True,
        }
        if cancel is not None:
            # Backoff sleeps wake up as soon as the event is set.
            options["stop"] |= stop_when_event_set(cancel)
            options["sleep"] = cancel.wait
        return retry(**options)

    def close(self) -> None:
        """Drop the cached API groups."""
        self._core_v1 = None
        self._apps_v1 = None
        logger.debug("kubernetes_client_closed")

    def __enter__(self) -> KubernetesClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
