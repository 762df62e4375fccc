"""
Ledger metadata descriptors.
"""

from contractrest.metadata.models import (
    DEFAULT_MUTATING_TAG,
    ChaincodeMetadata,
    ComponentMetadata,
    ContractDescriptor,
    InvocationMode,
    OperationDescriptor,
    OperationParameter,
    SchemaNode,
    parse_metadata,
)

__all__ = [
    "DEFAULT_MUTATING_TAG",
    "ChaincodeMetadata",
    "ComponentMetadata",
    "ContractDescriptor",
    "InvocationMode",
    "OperationDescriptor",
    "OperationParameter",
    "SchemaNode",
    "parse_metadata",
]
