"""Kubernetes resolution models."""

from deployment_tree.integrations.kubernetes.models.resolution import (
    CategoryOutcome,
    ReferenceKind,
    ResolutionResult,
    ResourceCategory,
)

__all__ = [
    "CategoryOutcome",
    "ReferenceKind",
    "ResolutionResult",
    "ResourceCategory",
]
