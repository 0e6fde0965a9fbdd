"""Convenience exports for dscript telemetry utilities."""

from . import logger

__all__ = ["logger"]
