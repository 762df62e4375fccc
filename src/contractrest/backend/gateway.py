"""
Gateway-backed ledger backend.

Exposes a single configured network and contract group through a gateway
session, the way a Fabric client application does:

- operations are invoked as ``"<contract>:<operation>"``;
- metadata comes from evaluating ``org.hyperledger.fabric:GetMetadata``,
  or from a local JSON file when one is configured;
- the gateway connection profile is read from JSON or YAML.

Opening the session itself (wallet, identity, TLS, discovery) is delegated
to a *session factory*: any callable ``factory(config, profile)`` returning
an object with async ``evaluate_transaction`` / ``submit_transaction``
methods.  This keeps credential handling outside the synthesis engine.

Guardrails:
    ❌ DON'T: Call ``invoke_*`` before ``connect()``
    ✅ DO: Let the application lifespan connect before synthesis

Tags:
    backend, gateway, ledger, fabric, connection-profile, contractrest

Doc-Types:
    api-reference
"""

from __future__ import annotations

import inspect
import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import yaml

from contractrest.core.errors import BackendError, ConfigError
from contractrest.core.logging import get_logger
from contractrest.metadata.models import ChaincodeMetadata, parse_metadata

logger = get_logger(__name__)

METADATA_NAMESPACE = "org.hyperledger.fabric"
METADATA_FUNCTION = "GetMetadata"

_JSON_EXTENSION = re.compile(r"jso?n", re.IGNORECASE)
_YAML_EXTENSION = re.compile(r"ya?ml", re.IGNORECASE)


class GatewaySession(Protocol):
    """Connected gateway session bound to one network and contract group."""

    async def evaluate_transaction(self, name: str, *args: str) -> bytes: ...

    async def submit_transaction(self, name: str, *args: str) -> bytes: ...


@dataclass(frozen=True)
class GatewayConfig:
    """Where and as whom the gateway session connects.

    Attributes:
        network: Network (channel) to expose
        contract_group: Contract group (chaincode) to expose
        gateway_profile: Path to the JSON/YAML connection profile
        identity: Wallet label of the identity to connect as
        wallet_path: Wallet directory
        as_localhost: Rewrite discovered endpoints to localhost (development)
        local_metadata_file: Read metadata from this file instead of the ledger
    """

    network: str
    contract_group: str
    gateway_profile: Path
    identity: str
    wallet_path: Path
    as_localhost: bool = False
    local_metadata_file: Path | None = None


# May return the session or an awaitable resolving to it.
SessionFactory = Callable[[GatewayConfig, dict[str, Any]], Any]


def load_connection_profile(path: str | Path) -> dict[str, Any]:
    """Read a gateway connection profile, choosing JSON or YAML by extension."""
    filename = Path(path).resolve()
    if not filename.exists():
        raise ConfigError(f"Gateway profile does not exist {path}")

    extension = filename.suffix
    text = filename.read_text(encoding="utf-8")
    if _JSON_EXTENSION.search(extension):
        return json.loads(text)
    if _YAML_EXTENSION.search(extension):
        return yaml.safe_load(text)
    raise ConfigError(f"Unclear what format the gateway profile is in {filename}")


class GatewayBackend:
    """:class:`~contractrest.backend.protocol.LedgerBackend` over a gateway session."""

    def __init__(self, config: GatewayConfig, session_factory: SessionFactory | None = None):
        self.config = config
        self._session_factory = session_factory
        self._session: GatewaySession | None = None

    @property
    def session(self) -> GatewaySession:
        if self._session is None:
            raise BackendError("Gateway session is not connected").with_context(
                network=self.config.network, contract_group=self.config.contract_group
            )
        return self._session

    async def connect(self) -> None:
        if self._session_factory is None:
            raise ConfigError("No gateway session factory configured (CONTRACTREST_SESSION_FACTORY)")

        logger.debug("reading_connection_profile", path=str(self.config.gateway_profile))
        profile = load_connection_profile(self.config.gateway_profile)

        logger.info(
            "connecting_to_gateway",
            network=self.config.network,
            contract_group=self.config.contract_group,
            identity=self.config.identity,
        )
        try:
            session = self._session_factory(self.config, profile)
            if inspect.isawaitable(session):
                session = await session
        except Exception as exc:
            logger.error("gateway_connection_failed", error=str(exc))
            raise
        self._session = session

    async def close(self) -> None:
        session, self._session = self._session, None
        closer = getattr(session, "close", None)
        if closer is not None:
            result = closer()
            if inspect.isawaitable(result):
                await result

    async def list_groups(self) -> list[str]:
        return [self.config.network]

    async def list_contract_groups(self, group_id: str) -> list[str]:
        return [self.config.contract_group]

    async def fetch_metadata(self, group_id: str, contract_group_id: str) -> ChaincodeMetadata:
        if self.config.local_metadata_file is not None:
            logger.info("reading_local_metadata", path=str(self.config.local_metadata_file))
            return parse_metadata(Path(self.config.local_metadata_file).read_bytes())

        response = await self.invoke_read_only(group_id, contract_group_id, METADATA_NAMESPACE, METADATA_FUNCTION)
        return parse_metadata(response or b"")

    async def invoke_mutating(self, group_id, contract_group_id, contract_id, operation, *args: str) -> bytes:
        name = f"{contract_id}:{operation}"
        try:
            return await self.session.submit_transaction(name, *args)
        except Exception as exc:
            logger.warning("submit_transaction_failed", transaction=name, error=str(exc))
            raise

    async def invoke_read_only(self, group_id, contract_group_id, contract_id, operation, *args: str) -> bytes:
        name = f"{contract_id}:{operation}"
        try:
            return await self.session.evaluate_transaction(name, *args)
        except Exception as exc:
            logger.warning("evaluate_transaction_failed", transaction=name, error=str(exc))
            raise
