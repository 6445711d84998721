"""Shared plumbing for the provider and the resolver."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from deployment_tree.integrations.kubernetes.client import KubernetesClient

logger = structlog.get_logger()


class ClusterService:
    """Mixin for objects that work against one cluster.

    Holds the client, a logger bound to ``_entity_name``, and the namespace
    and deadline helpers that the provider and the resolver both need.
    """

    _entity_name: str = ""

    def __init__(self, client: KubernetesClient) -> None:
        self._client = client
        self._log = logger.bind(entity=self._entity_name)

    def _namespace(self, namespace: str | None) -> str:
        return namespace or self._client.default_namespace

    @staticmethod
    def _remaining(deadline: float | None) -> float | None:
        """Seconds left before a ``time.monotonic()`` deadline, never negative."""
        if deadline is None:
            return None
        return max(deadline - time.monotonic(), 0.0)
