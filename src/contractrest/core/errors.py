"""
Structured error types for contractrest.

Provides a small hierarchy of typed errors carrying a category, structured
context (which network / contract group / contract / operation was being
handled) and an optional chained cause.

Manifesto:
    - **Typed Error Hierarchy:** Boot-time metadata failures, configuration
      failures and backend failures are distinct types
    - **Rich Context:** Errors carry the ledger coordinates they relate to
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                   ContractRestError                       │
        │            (category, context, cause)                     │
        ├──────────────────────────────────────────────────────────┤
        │  MetadataError        ConfigError        BackendError     │
        │  (METADATA)           (CONFIG)           (BACKEND)        │
        │       │                                                   │
        │  InvalidIdentifierError                                   │
        │  (VALIDATION)                                             │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = MetadataError("metadata has no contracts")
    >>> error.with_context(network="mychannel", contract_group="fabcar")
    MetadataError('metadata has no contracts', category=METADATA)
    >>> error.context.network
    'mychannel'

Guardrails:
    ❌ DON'T: Raise MetadataError per request. Metadata is only parsed at boot
    ✅ DO: Let boot-time errors abort startup

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, contractrest

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    METADATA = "METADATA"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    BACKEND = "BACKEND"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        network: Network (channel) identifier
        contract_group: Contract-group (chaincode) identifier
        contract: Contract name within the contract group
        operation: Operation (transaction) name
        metadata: Additional key-value pairs
    """

    network: str | None = None
    contract_group: str | None = None
    contract: str | None = None
    operation: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["network", "contract_group", "contract", "operation"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ContractRestError(Exception):
    """
    Base exception for all contractrest errors.

    Subclasses set ``default_category`` to classify themselves.

    Examples:
        >>> error = ContractRestError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'ContractRestError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ContractRestError:
        """
        Add context to this error (fluent API).

        Usage:
            raise MetadataError("bad schema").with_context(
                network="mychannel",
                contract_group="fabcar",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# BOOT-TIME METADATA ERRORS
# =============================================================================


class MetadataError(ContractRestError):
    """
    Malformed or unreachable metadata snapshot.

    Fatal: the process must not start serving with an incomplete route tree.
    """

    default_category = ErrorCategory.METADATA


class InvalidIdentifierError(MetadataError):
    """An identifier cannot be used as a single path segment."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, kind: str, identifier: str, message: str | None = None):
        self.kind = kind
        self.identifier = identifier
        super().__init__(message or f"Invalid {kind} identifier {identifier!r}: must be non-empty and contain no '/', '{{' or '}}'")


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ContractRestError):
    """Configuration error. The configuration must be fixed before restart."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# BACKEND ERRORS
# =============================================================================


class BackendError(ContractRestError):
    """The backend collaborator failed to answer a call."""

    default_category = ErrorCategory.BACKEND


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ContractRestError",
    "MetadataError",
    "InvalidIdentifierError",
    "ConfigError",
    "BackendError",
]
