"""
Ledger backend collaborators.

The synthesis engine depends only on :class:`LedgerBackend`; concrete
backends live here.
"""

from contractrest.backend.factory import create_backend, resolve_callable_ref
from contractrest.backend.gateway import GatewayBackend, GatewayConfig, load_connection_profile
from contractrest.backend.memory import InMemoryBackend
from contractrest.backend.protocol import LedgerBackend

__all__ = [
    "GatewayBackend",
    "GatewayConfig",
    "InMemoryBackend",
    "LedgerBackend",
    "create_backend",
    "load_connection_profile",
    "resolve_callable_ref",
]
