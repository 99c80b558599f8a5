"""Public observability primitives: structured logging configuration."""

from pbxgraph.observability.logging import configure_logging, reset_logging

__all__ = ["configure_logging", "reset_logging"]
