"""
Route-tree synthesis and per-operation dispatch.
"""

from contractrest.routing.dispatcher import (
    OperationBinding,
    build_operation_endpoint,
    coerce_arguments,
    find_missing,
    operation_paths,
    render_result,
)
from contractrest.routing.synthesizer import RouteNode, compose, synthesize, validate_identifier

__all__ = [
    "OperationBinding",
    "RouteNode",
    "build_operation_endpoint",
    "coerce_arguments",
    "compose",
    "find_missing",
    "operation_paths",
    "render_result",
    "synthesize",
    "validate_identifier",
]
