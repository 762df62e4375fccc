"""
API-specific settings.

Extends :class:`~contractrest.core.settings.ContractRestBaseSettings` with
the parameters that shape the synthesized HTTP surface and the gateway
backend it fronts.

All values can be overridden via environment variables prefixed with
``CONTRACTREST_`` (e.g. ``CONTRACTREST_NETWORK=mychannel``).
"""

from __future__ import annotations

from pydantic import Field

from contractrest.core.settings import ContractRestBaseSettings
from contractrest.metadata.models import DEFAULT_MUTATING_TAG


class ContractRestSettings(ContractRestBaseSettings):
    """Settings for the contractrest REST server.

    Order of precedence (highest → lowest):
        1. Environment variables (``CONTRACTREST_PORT``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    # ── API ──────────────────────────────────────────────────────────────
    api_title: str = Field(default="contractrest", description="Interface document title")
    api_version: str = Field(default="0.1.0", description="Interface document version string")
    document_url: str = Field(default="/swagger.json", description="Where the merged interface document is served")
    docs_url: str | None = Field(default="/api-docs", description="Interactive docs UI (None to disable)")
    mutating_tag: str = Field(
        default=DEFAULT_MUTATING_TAG,
        description="Operation tag selecting the state-mutating invocation mode",
    )

    # ── CORS ─────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # ── Backend selection ────────────────────────────────────────────────
    backend_factory: str | None = Field(
        default=None,
        description="'module:callable' building the backend from these settings",
    )
    session_factory: str | None = Field(
        default=None,
        description="'module:callable' opening the gateway session",
    )

    # ── Gateway ──────────────────────────────────────────────────────────
    network: str | None = Field(default=None, description="Network (channel) name to connect to")
    contract: str | None = Field(default=None, description="Contract group (chaincode) to connect to")
    identity: str | None = Field(default=None, description="Identity to connect as")
    wallet_path: str | None = Field(default=None, description="Wallet directory")
    gateway_profile: str | None = Field(default=None, description="Path to the YAML or JSON gateway profile")
    as_localhost: bool = Field(default=False, description="Development option: discovered peers are on localhost")

    # ── Files ────────────────────────────────────────────────────────────
    local_metadata_file: str | None = Field(
        default=None,
        description="Read the metadata from a local file rather than the contract",
    )
    output_file: str | None = Field(
        default=None,
        description="Write the merged interface document here after synthesis",
    )
