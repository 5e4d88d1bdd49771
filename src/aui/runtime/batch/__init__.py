"""Ordered, failure-isolated batch execution."""

from .batch import batch_execute

__all__ = ["batch_execute"]
