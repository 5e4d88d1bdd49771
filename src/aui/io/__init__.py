"""IO - Context capabilities and the wire codec.

Contains: cache store, HTTP fetch, JSON wire handlers.
"""
