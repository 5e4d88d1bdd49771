"""Bridges between synchronous callers and the async pipeline."""

from .interop import run_sync

__all__ = ["run_sync"]
