"""Errors raised while resolving a Deployment.

Fatal errors (the Deployment fetch, its selector, loading a cluster
configuration) stop the run. The same types raised inside a category lookup
only degrade that category.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deployment_tree.integrations.kubernetes.models.resolution import ResourceCategory


class KubernetesError(Exception):
    """Base error for anything that goes wrong talking to the cluster.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status returned by the API server, if there was one.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (status: {self.status_code})"
        return self.message


class KubernetesConnectionError(KubernetesError):
    """The API server could not be reached or no configuration could be loaded.

    This is the only error the client retries.
    """

    def __init__(
        self,
        message: str = "Failed to connect to Kubernetes cluster",
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class KubernetesAuthError(KubernetesError):
    """Credentials were rejected (401) or RBAC denied the request (403)."""

    def __init__(self, message: str = "Access denied", status_code: int = 401) -> None:
        super().__init__(message, status_code)


class KubernetesNotFoundError(KubernetesError):
    """A named object, or the namespace it was looked up in, does not exist."""

    def __init__(self, kind: str, name: str | None = None, namespace: str | None = None) -> None:
        subject = f"{kind} '{name}'" if name else kind
        message = f"{subject} not found"
        if namespace:
            message += f" in namespace '{namespace}'"
        super().__init__(message, 404)
        self.kind = kind
        self.name = name


class KubernetesValidationError(KubernetesError):
    """The API server rejected a request as malformed (400/422)."""

    def __init__(
        self,
        message: str = "Request rejected as invalid",
        field_errors: dict[str, str] | None = None,
        status_code: int | None = 422,
    ) -> None:
        super().__init__(message, status_code)
        self.field_errors = field_errors or {}


class KubernetesSelectorError(KubernetesValidationError):
    """A Deployment's pod selector cannot be turned into a label selector string.

    The selector scopes the Service and ReplicaSet lookups, so a Deployment
    with an unusable selector cannot be resolved at all.
    """

    def __init__(self, message: str = "Invalid label selector", field: str | None = None) -> None:
        super().__init__(message, {field: message} if field else None, status_code=None)


class KubernetesTimeoutError(KubernetesError):
    """A lookup ran past the resolution deadline or was cancelled by it.

    Attributes:
        category: The category whose lookup did not finish, when known.
        timeout_seconds: The deadline that was exceeded, when known.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        category: ResourceCategory | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        if message is None:
            message = (
                f"{category.label} lookup did not finish" if category else "Lookup timed out"
            )
        if timeout_seconds:
            message = f"{message} (after {timeout_seconds:g}s)"
        super().__init__(message)
        self.category = category
        self.timeout_seconds = timeout_seconds
