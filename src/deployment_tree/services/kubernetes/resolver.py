"""Deployment resolution.

Resolves the Service, ReplicaSet, ConfigMaps, Secrets and plain Volumes
associated with a Deployment. The Deployment is fetched once; the five
categories are then resolved concurrently, one worker per category, and
collected in a fixed order under a single deadline.

Each category task returns a ``CategoryOutcome``: the finished future is the
end-of-stream marker for that category, so no list is read before the task
that builds it has returned. A failing task degrades its own category only.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from functools import partial
from typing import TYPE_CHECKING, Any

from deployment_tree.integrations.kubernetes.exceptions import (
    KubernetesError,
    KubernetesTimeoutError,
)
from deployment_tree.integrations.kubernetes.models.base import _get_name, _safe_get
from deployment_tree.integrations.kubernetes.models.resolution import (
    CategoryOutcome,
    ReferenceKind,
    ResolutionResult,
    ResourceCategory,
)
from deployment_tree.services.kubernetes.base import ClusterService
from deployment_tree.services.kubernetes.provider import KubernetesResourceProvider
from deployment_tree.services.kubernetes.references import iter_references

if TYPE_CHECKING:
    from deployment_tree.integrations.kubernetes.client import KubernetesClient

CategoryTask = Callable[[], list[str]]


def _first_match(
    list_fn: Callable[..., list[Any]],
    namespace: str,
    selector: str,
    cancel: threading.Event,
    deadline: float | None,
) -> list[str]:
    """Name of the first listed object, as a zero or one element list."""
    for item in list_fn(namespace, selector, cancel=cancel, deadline=deadline):
        if name := _get_name(item):
            return [name]
    return []


def _collect_references(pod_spec: Any, kind: ReferenceKind, cancel: threading.Event) -> list[str]:
    """All references of one kind.

    Raises:
        KubernetesTimeoutError: If ``cancel`` is set before the walk finishes.
    """
    names: list[str] = []
    for name in iter_references(pod_spec, kind):
        if cancel.is_set():
            raise KubernetesTimeoutError(f"{kind} collection cancelled")
        names.append(name)
    return names


class DeploymentResolver(ClusterService):
    """Resolves the resources associated with a Deployment.

    Example:
        >>> resolver = DeploymentResolver(client, resolve_timeout=60)
        >>> result = resolver.resolve("web", "default")
        >>> result.service
        'web-svc'
    """

    _entity_name = "deployment_resolver"

    def __init__(
        self,
        client: KubernetesClient,
        *,
        provider: KubernetesResourceProvider | None = None,
        resolve_timeout: float | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            client: Kubernetes API client instance.
            provider: Resource provider; built from ``client`` when omitted.
            resolve_timeout: Deadline in seconds for collecting all categories.
                None waits indefinitely.
        """
        super().__init__(client)
        self._provider = provider or KubernetesResourceProvider(client)
        self._resolve_timeout = resolve_timeout

    def resolve(
        self,
        name: str,
        namespace: str | None = None,
        *,
        timeout: float | None = None,
    ) -> ResolutionResult:
        """Resolve every category for one Deployment.

        No worker thread is left running when this returns.

        Args:
            name: Deployment name.
            namespace: Deployment namespace (uses default if None).
            timeout: Overrides the resolver's deadline for this call.

        Returns:
            The assembled result. Categories that failed or missed the
            deadline are empty and listed in ``errors``.

        Raises:
            KubernetesError: If the Deployment cannot be fetched.
            KubernetesSelectorError: If its pod selector is unusable.
        """
        ns = self._namespace(namespace)
        log = self._log.bind(deployment=name, namespace=ns)
        log.info("resolving_deployment")

        deployment = self._provider.get_deployment(name, ns)
        selector = self._provider.derive_selector(deployment)
        pod_spec = _safe_get(deployment, "spec", "template", "spec")
        log.debug("derived_selector", label_selector=selector)

        limit = timeout if timeout is not None else self._resolve_timeout
        deadline = None if limit is None else time.monotonic() + limit
        cancel = threading.Event()
        tasks: dict[ResourceCategory, CategoryTask] = {
            ResourceCategory.SERVICE: partial(
                _first_match, self._provider.list_services, ns, selector, cancel, deadline
            ),
            ResourceCategory.REPLICA_SET: partial(
                _first_match, self._provider.list_replica_sets, ns, selector, cancel, deadline
            ),
            ResourceCategory.CONFIG_MAPS: partial(
                _collect_references, pod_spec, ReferenceKind.CONFIG_MAP, cancel
            ),
            ResourceCategory.SECRETS: partial(
                _collect_references, pod_spec, ReferenceKind.SECRET, cancel
            ),
            ResourceCategory.VOLUMES: partial(
                _collect_references, pod_spec, ReferenceKind.VOLUME, cancel
            ),
        }

        outcomes = self._run_all(tasks, deadline, limit, cancel)

        result = ResolutionResult.from_outcomes(name, ns, outcomes)
        log.info(
            "resolved_deployment",
            service=result.service,
            replica_set=result.replica_set,
            config_maps=len(result.config_maps),
            secrets=len(result.secrets),
            volumes=len(result.volumes),
            degraded=sorted(result.errors),
        )
        return result

    def _run_all(
        self,
        tasks: dict[ResourceCategory, CategoryTask],
        deadline: float | None,
        limit: float | None,
        cancel: threading.Event,
    ) -> dict[ResourceCategory, CategoryOutcome]:
        """Run category tasks concurrently and collect them in order.

        Categories still running when the deadline passes are recorded as
        timed out and the cancellation event is set. The workers are joined
        before returning; a cancelled request gives up within its clamped
        request timeout.
        """
        outcomes: dict[ResourceCategory, CategoryOutcome] = {}
        executor = ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="deployment-tree")
        try:
            futures: dict[ResourceCategory, Future[CategoryOutcome]] = {
                category: executor.submit(self._run_task, category, task)
                for category, task in tasks.items()
            }

            for category, future in futures.items():
                try:
                    outcomes[category] = future.result(timeout=self._remaining(deadline))
                except FuturesTimeoutError:
                    cancel.set()
                    error = KubernetesTimeoutError(category=category, timeout_seconds=limit)
                    self._log.warning(
                        "category_timed_out", category=str(category), error=str(error)
                    )
                    outcomes[category] = CategoryOutcome(category, error=str(error))
        finally:
            cancel.set()
            executor.shutdown(wait=True, cancel_futures=True)

        return outcomes

    def _run_task(self, category: ResourceCategory, task: CategoryTask) -> CategoryOutcome:
        """Run one category task, degrading it on Kubernetes errors."""
        log = self._log.bind(category=str(category))
        try:
            names = task()
        except KubernetesError as e:
            log.warning("category_degraded", error=str(e))
            return CategoryOutcome(category, error=str(e))
        log.debug("category_resolved", count=len(names))
        return CategoryOutcome(category, names)
