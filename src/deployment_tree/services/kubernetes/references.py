"""Pod template reference extraction.

Walks an already-fetched pod spec and yields the names of the ConfigMaps,
Secrets or plain volumes it references. Traversal order is part of the
output: containers are visited one at a time, each giving its environment
variables and then its ``envFrom`` sources, and pod volumes come last.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import structlog

from deployment_tree.integrations.kubernetes.models.base import _safe_get
from deployment_tree.integrations.kubernetes.models.resolution import ReferenceKind

logger = structlog.get_logger()

# kind -> (env valueFrom attr, envFrom attr, volume source attr, volume source name attr)
_REFERENCE_FIELDS: dict[ReferenceKind, tuple[str, str, str, str]] = {
    ReferenceKind.CONFIG_MAP: ("config_map_key_ref", "config_map_ref", "config_map", "name"),
    ReferenceKind.SECRET: ("secret_key_ref", "secret_ref", "secret", "secret_name"),
}


def iter_references(pod_spec: Any, kind: ReferenceKind) -> Iterator[str]:
    """Yield referenced resource names from a pod spec.

    Duplicates are preserved. A reference that names the category but has no
    inner name is skipped with a warning.

    Args:
        pod_spec: A ``V1PodSpec`` (``deployment.spec.template.spec``).
        kind: Which references to collect.

    Yields:
        Resource names in traversal order.
    """
    if pod_spec is None:
        return

    if kind is ReferenceKind.VOLUME:
        yield from _iter_plain_volumes(pod_spec)
        return

    env_attr, env_from_attr, volume_attr, volume_name_attr = _REFERENCE_FIELDS[kind]
    for container in _safe_get(pod_spec, "containers", default=[]):
        for env in _safe_get(container, "env", default=[]):
            ref = _safe_get(env, "value_from", env_attr)
            if ref is None:
                continue
            source = f"env {_safe_get(env, 'name')}"
            if name := _checked_name(ref, "name", kind, container, source=source):
                yield name

        for env_from in _safe_get(container, "env_from", default=[]):
            ref = _safe_get(env_from, env_from_attr)
            if ref is None:
                continue
            if name := _checked_name(ref, "name", kind, container, source="envFrom"):
                yield name

    for volume in _safe_get(pod_spec, "volumes", default=[]):
        source = _safe_get(volume, volume_attr)
        if source is None:
            continue
        label = f"volume {_safe_get(volume, 'name')}"
        if name := _checked_name(source, volume_name_attr, kind, None, source=label):
            yield name


def _iter_plain_volumes(pod_spec: Any) -> Iterator[str]:
    """Yield names of volumes backed by neither a ConfigMap nor a Secret."""
    for volume in _safe_get(pod_spec, "volumes", default=[]):
        if _safe_get(volume, "config_map") is not None or _safe_get(volume, "secret") is not None:
            continue
        if name := _safe_get(volume, "name"):
            yield name


def _checked_name(
    ref: Any,
    attr: str,
    kind: ReferenceKind,
    container: Any,
    *,
    source: str,
) -> str | None:
    name = _safe_get(ref, attr)
    if not name:
        logger.warning(
            "skipping_malformed_reference",
            kind=str(kind),
            container=_safe_get(container, "name"),
            source=source,
        )
        return None
    return str(name)
