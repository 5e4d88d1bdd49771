"""Network-fetch capability."""

from .fetch import Fetch, HttpFetch

__all__ = ["Fetch", "HttpFetch"]
