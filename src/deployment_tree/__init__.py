"""Deployment tree: show the resources a Kubernetes Deployment depends on."""

__version__ = "0.1.0"
