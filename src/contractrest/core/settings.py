"""Shared base settings.

``ContractRestBaseSettings`` holds the knobs every contractrest process
needs (bind address, log level, debug mode) so the API settings only
declare what is specific to the ledger surface.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup, not runtime
    - **Environment-driven:** Reads from env vars and .env files
    - **Extra ignore:** Unknown env vars don't cause startup failures

Tags:
    settings, configuration, pydantic, environment, contractrest
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ContractRestBaseSettings(BaseSettings):
    """Common process settings.

    Fields
    ──────
    host         : Bind address for the HTTP listener
    port         : Bind port for the HTTP listener
    debug        : Enable debug mode (verbose error details)
    log_level    : Structlog log level
    log_json     : JSON log lines (None = auto-detect from tty)
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTRACTREST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Network ──────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool | None = None
