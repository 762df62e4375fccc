"""
Backend collaborator protocol.

The synthesis engine never talks to a ledger directly.  Everything it needs
from the backend — the directory of networks and contract groups, one
metadata snapshot per contract group, and the two invocation modes — goes
through :class:`LedgerBackend`.

Manifesto:
    Connection lifecycle (credentials, handshake, contract binding) belongs
    to the implementation.  The core only depends on this shape, so tests
    can swap in :class:`~contractrest.backend.memory.InMemoryBackend`.

Concurrency:
    Implementations must tolerate concurrent ``invoke_*`` calls from
    interleaved requests; the core takes no lock around them.

Tags:
    protocol, backend, ledger, decoupling, contractrest

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from contractrest.metadata.models import ChaincodeMetadata


@runtime_checkable
class LedgerBackend(Protocol):
    """Contract between the route-tree synthesizer and a ledger backend."""

    async def connect(self) -> None:
        """Establish the backend session. Called once before synthesis."""
        ...

    async def close(self) -> None:
        """Release the backend session at shutdown."""
        ...

    async def list_groups(self) -> Sequence[str]:
        """Network (channel) identifiers."""
        ...

    async def list_contract_groups(self, group_id: str) -> Sequence[str]:
        """Contract-group (chaincode) identifiers on a network."""
        ...

    async def fetch_metadata(self, group_id: str, contract_group_id: str) -> ChaincodeMetadata:
        """Metadata snapshot of one contract group."""
        ...

    async def invoke_mutating(
        self,
        group_id: str,
        contract_group_id: str,
        contract_id: str,
        operation: str,
        *args: str,
    ) -> bytes | None:
        """Submit a state-mutating operation and return its raw result."""
        ...

    async def invoke_read_only(
        self,
        group_id: str,
        contract_group_id: str,
        contract_id: str,
        operation: str,
        *args: str,
    ) -> bytes | None:
        """Evaluate a read-only operation and return its raw result."""
        ...
