"""JSON wire codec for remote invocation and discovery."""

from .wire import (
    MalformedRequest,
    capabilities_payload,
    encode,
    encode_result,
    handle_batch_request,
    handle_request,
)

__all__ = [
    "handle_request", "handle_batch_request", "capabilities_payload",
    "encode", "encode_result", "MalformedRequest",
]
