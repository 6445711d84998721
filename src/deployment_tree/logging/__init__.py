"""Logging configuration for deployment_tree."""

from deployment_tree.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
