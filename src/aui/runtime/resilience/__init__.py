"""Resilience primitives."""

from .timeout import execute_with_timeout

__all__ = ["execute_with_timeout"]
