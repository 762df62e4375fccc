"""
Factory functions that create a ledger backend from settings.

``settings.backend_factory`` (``"module:callable"``) wins when set; the
callable receives the settings and returns a backend.  Otherwise a
:class:`~contractrest.backend.gateway.GatewayBackend` is built from the
gateway fields, with its session factory resolved the same way.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from contractrest.backend.gateway import GatewayBackend, GatewayConfig
from contractrest.backend.protocol import LedgerBackend
from contractrest.core.errors import ConfigError

if TYPE_CHECKING:
    from contractrest.api.settings import ContractRestSettings


def resolve_callable_ref(ref: str) -> Callable[..., Any]:
    """Import and return the callable identified by ``'module:qualname'``.

    Raises:
        ConfigError: The reference is malformed, unimportable or not callable.
    """
    module_path, _, attr_path = ref.partition(":")
    if not module_path or not attr_path:
        raise ConfigError(f"Invalid callable ref (expected 'module:qualname'): {ref!r}")
    try:
        obj: Any = importlib.import_module(module_path)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as exc:
        raise ConfigError(f"Cannot resolve {ref!r}: {exc}", cause=exc) from exc
    if not callable(obj):
        raise ConfigError(f"{ref!r} resolved to non-callable: {type(obj)}")
    return obj


def create_gateway_config(settings: ContractRestSettings) -> GatewayConfig:
    missing = [
        key
        for key in ("network", "contract", "gateway_profile", "identity", "wallet_path")
        if not getattr(settings, key)
    ]
    if missing:
        raise ConfigError(f"Missing required gateway settings: {', '.join(missing)}")

    return GatewayConfig(
        network=settings.network,
        contract_group=settings.contract,
        gateway_profile=Path(settings.gateway_profile),
        identity=settings.identity,
        wallet_path=Path(settings.wallet_path),
        as_localhost=settings.as_localhost,
        local_metadata_file=Path(settings.local_metadata_file) if settings.local_metadata_file else None,
    )


def create_backend(settings: ContractRestSettings) -> LedgerBackend:
    """Create the ledger backend selected by *settings*."""
    if settings.backend_factory:
        return resolve_callable_ref(settings.backend_factory)(settings)

    session_factory = resolve_callable_ref(settings.session_factory) if settings.session_factory else None
    return GatewayBackend(create_gateway_config(settings), session_factory)
