"""Models describing the resources resolved for one Deployment."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ResourceCategory(StrEnum):
    """Categories of resources reported for a Deployment, in display order."""

    SERVICE = "service"
    REPLICA_SET = "replica_set"
    CONFIG_MAPS = "config_maps"
    SECRETS = "secrets"
    VOLUMES = "volumes"

    @property
    def label(self) -> str:
        """Heading used for this category in the rendered tree."""
        return _CATEGORY_LABELS[self]

    @property
    def is_single(self) -> bool:
        """Whether the category resolves to at most one name."""
        return self in (ResourceCategory.SERVICE, ResourceCategory.REPLICA_SET)


_CATEGORY_LABELS = {
    ResourceCategory.SERVICE: "Service",
    ResourceCategory.REPLICA_SET: "Replica Set",
    ResourceCategory.CONFIG_MAPS: "Config Maps",
    ResourceCategory.SECRETS: "Secrets",
    ResourceCategory.VOLUMES: "Volumes",
}


class ReferenceKind(StrEnum):
    """What the pod template field extractor looks for."""

    CONFIG_MAP = "config_map"
    SECRET = "secret"
    VOLUME = "volume"


@dataclass(frozen=True)
class CategoryOutcome:
    """Result of one resolution task.

    ``names`` is complete once the task returns; a degraded task carries the
    error message and whatever names it had gathered (usually none).
    """

    category: ResourceCategory
    names: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def first(self) -> str | None:
        """First resolved name, or None when nothing matched."""
        return self.names[0] if self.names else None


class ResolutionResult(BaseModel):
    """Everything resolved for one Deployment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    deployment: str = Field(description="Deployment name")
    namespace: str = Field(description="Deployment namespace")
    service: str | None = Field(default=None, description="First matching Service")
    replica_set: str | None = Field(default=None, description="First matching ReplicaSet")
    config_maps: list[str] = Field(default_factory=list, description="Referenced ConfigMaps")
    secrets: list[str] = Field(default_factory=list, description="Referenced Secrets")
    volumes: list[str] = Field(default_factory=list, description="Plain volumes")
    errors: dict[str, str] = Field(
        default_factory=dict,
        description="Categories that could not be resolved, with the reason",
    )

    @classmethod
    def from_outcomes(
        cls,
        deployment: str,
        namespace: str,
        outcomes: dict[ResourceCategory, CategoryOutcome],
    ) -> ResolutionResult:
        """Assemble a result from the per-category task outcomes."""

        def names(category: ResourceCategory) -> list[str]:
            outcome = outcomes.get(category)
            return list(outcome.names) if outcome else []

        def first(category: ResourceCategory) -> str | None:
            outcome = outcomes.get(category)
            return outcome.first if outcome else None

        return cls(
            deployment=deployment,
            namespace=namespace,
            service=first(ResourceCategory.SERVICE),
            replica_set=first(ResourceCategory.REPLICA_SET),
            config_maps=names(ResourceCategory.CONFIG_MAPS),
            secrets=names(ResourceCategory.SECRETS),
            volumes=names(ResourceCategory.VOLUMES),
            errors={
                str(category): outcome.error
                for category, outcome in outcomes.items()
                if outcome.error
            },
        )

    def names_for(self, category: ResourceCategory) -> list[str]:
        """Names resolved for a category, as a list."""
        if category.is_single:
            value = getattr(self, str(category))
            return [value] if value else []
        return list(getattr(self, str(category)))

    @property
    def degraded(self) -> bool:
        """Whether any category failed to resolve."""
        return bool(self.errors)
