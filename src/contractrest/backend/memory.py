"""
In-memory ledger backend.

Holds metadata snapshots and Python callables keyed by ledger coordinates.
Used by the test-suite and by ``contractrest openapi`` to synthesize a
document without connecting to a ledger.

Examples:
    >>> backend = InMemoryBackend()
    >>> backend.add_contract_group("mychannel", "fabcar", {"contracts": {...}})
    >>> backend.register("mychannel", "fabcar", "FabCar", "queryCar", lambda key: {"make": "Toyota"})
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Callable, Mapping
from typing import Any

from contractrest.core.errors import BackendError
from contractrest.metadata.models import ChaincodeMetadata, InvocationMode, parse_metadata

Handler = Callable[..., Any]


def to_buffer(result: Any) -> bytes:
    """Normalise a handler result to the backend's byte-buffer form."""
    if result is None:
        return b""
    if isinstance(result, (bytes, bytearray)):
        return bytes(result)
    if isinstance(result, str):
        return result.encode("utf-8")
    return json.dumps(result).encode("utf-8")


class InMemoryBackend:
    """Dictionary-backed :class:`~contractrest.backend.protocol.LedgerBackend`."""

    def __init__(self) -> None:
        self._metadata: dict[str, dict[str, ChaincodeMetadata]] = {}
        self._handlers: dict[tuple[str, str, str, str], Handler] = {}
        self.connected = False
        self.calls: list[tuple[InvocationMode, str, str, str, str, tuple]] = []

    # ── Registration ─────────────────────────────────────────────────

    def add_contract_group(
        self,
        network: str,
        contract_group: str,
        metadata: ChaincodeMetadata | Mapping[str, Any] | str | bytes,
    ) -> ChaincodeMetadata:
        if not isinstance(metadata, ChaincodeMetadata):
            metadata = parse_metadata(metadata)
        self._metadata.setdefault(network, {})[contract_group] = metadata
        return metadata

    def register(self, network: str, contract_group: str, contract: str, operation: str, handler: Handler) -> None:
        """Register the callable answering one operation (sync or async)."""
        self._handlers[(network, contract_group, contract, operation)] = handler

    # ── LedgerBackend ────────────────────────────────────────────────

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    async def list_groups(self) -> list[str]:
        return list(self._metadata)

    async def list_contract_groups(self, group_id: str) -> list[str]:
        return list(self._metadata.get(group_id, {}))

    async def fetch_metadata(self, group_id: str, contract_group_id: str) -> ChaincodeMetadata:
        try:
            return self._metadata[group_id][contract_group_id]
        except KeyError as exc:
            raise BackendError(f"No metadata registered for {group_id}/{contract_group_id}") from exc

    async def invoke_mutating(self, group_id, contract_group_id, contract_id, operation, *args: str) -> bytes:
        return await self._call(InvocationMode.SUBMIT, group_id, contract_group_id, contract_id, operation, args)

    async def invoke_read_only(self, group_id, contract_group_id, contract_id, operation, *args: str) -> bytes:
        return await self._call(InvocationMode.EVALUATE, group_id, contract_group_id, contract_id, operation, args)

    async def _call(self, mode: InvocationMode, group_id: str, contract_group_id: str, contract_id: str, operation: str, args: tuple) -> bytes:
        self.calls.append((mode, group_id, contract_group_id, contract_id, operation, args))
        handler = self._handlers.get((group_id, contract_group_id, contract_id, operation))
        if handler is None:
            raise BackendError(
                f"No handler registered for {contract_id}:{operation}"
            ).with_context(network=group_id, contract_group=contract_group_id, contract=contract_id, operation=operation)
        result = handler(*args)
        if inspect.isawaitable(result):
            result = await result
        return to_buffer(result)
