"""Kubernetes connection and resolution configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

ENV_PREFIX = "DEPTREE_"


def default_kubeconfig_path() -> str | None:
    """Return ``$HOME/.kube/config`` when HOME is set, otherwise None.

    None lets the kubernetes client fall back to its own discovery
    (``KUBECONFIG`` and friends).
    """
    if home := os.environ.get("HOME"):
        return str(Path(home) / ".kube" / "config")
    return None


class KubernetesConfig(BaseModel):
    """Complete configuration for a deployment tree run."""

    model_config = ConfigDict(extra="forbid")

    kubeconfig: str | None = None
    context: str | None = None
    namespace: str = "default"
    request_timeout: int = 30
    resolve_timeout: float = 60.0
    retry_attempts: int = 3
    output_format: Literal["tree", "json", "yaml"] = "tree"

    @field_validator("kubeconfig")
    @classmethod
    def validate_kubeconfig(cls, v: str | None) -> str | None:
        """Expand ~ in kubeconfig path."""
        if not v:
            return None
        return str(Path(v).expanduser())

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Reject an empty namespace."""
        if not v.strip():
            raise ValueError("namespace must not be empty")
        return v.strip()

    @field_validator("request_timeout", "resolve_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeouts are positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry_attempts is at least one attempt."""
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> KubernetesConfig:
        """Create configuration with environment variable overrides.

        Values present in ``base_config`` (typically explicit CLI flags) win
        over the environment; the environment wins over built-in defaults.

        Supported environment variables:
            DEPTREE_KUBECONFIG: Kubeconfig path
            DEPTREE_CONTEXT: Kubeconfig context
            DEPTREE_NAMESPACE: Default namespace
            DEPTREE_REQUEST_TIMEOUT: Per API request timeout in seconds
            DEPTREE_RESOLVE_TIMEOUT: Overall resolution deadline in seconds
            DEPTREE_RETRY_ATTEMPTS: Attempts for transient connection errors
            DEPTREE_OUTPUT: Output format (tree, json, yaml)
        """
        config_dict = {k: v for k, v in (base_config or {}).items() if v is not None}

        env_keys = {
            "kubeconfig": "KUBECONFIG",
            "context": "CONTEXT",
            "namespace": "NAMESPACE",
            "request_timeout": "REQUEST_TIMEOUT",
            "resolve_timeout": "RESOLVE_TIMEOUT",
            "retry_attempts": "RETRY_ATTEMPTS",
            "output_format": "OUTPUT",
        }
        for field, suffix in env_keys.items():
            if field in config_dict:
                continue
            if value := os.environ.get(f"{ENV_PREFIX}{suffix}"):
                config_dict[field] = value

        config_dict.setdefault("kubeconfig", default_kubeconfig_path())

        return cls.model_validate(config_dict)
