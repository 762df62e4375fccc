"""
CLI: ``contractrest serve`` — start the REST server in front of a ledger.

Options left unset fall back to ``CONTRACTREST_*`` environment variables
and then to the settings defaults.
"""

from __future__ import annotations

from typing import Any

import typer
import uvicorn
from pydantic import ValidationError
from rich.markup import escape

from contractrest.api.settings import ContractRestSettings
from contractrest.cli.utils import console, err_console, fail
from contractrest.core.errors import ContractRestError
from contractrest.core.logging import configure_logging


def build_settings(**overrides: Any) -> ContractRestSettings:
    """Settings from the environment with explicit CLI values layered on top."""
    return ContractRestSettings(**{key: value for key, value in overrides.items() if value is not None})


def serve(
    gateway: str | None = typer.Option(None, "--gateway", "-p", help="Path to the YAML or JSON gateway profile"),
    identity: str | None = typer.Option(None, "--identity", "-i", help="Identity to connect as"),
    wallet: str | None = typer.Option(None, "--wallet", "-w", help="Wallet directory"),
    network: str | None = typer.Option(None, "--network", "-n", help="Network (channel) to connect to"),
    contract: str | None = typer.Option(None, "--contract", "-c", help="Contract group (chaincode) to connect to"),
    localfile: str | None = typer.Option(None, "--localfile", "-f", help="Read the metadata from this file"),
    outputfile: str | None = typer.Option(None, "--outputfile", "-o", help="Write the interface document here"),
    as_localhost: bool | None = typer.Option(  # noqa: UP007
        None, "--aslocalhost/--no-aslocalhost", help="Discovered peers are on localhost"
    ),
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", help="Bind port"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level"),
) -> None:
    """Start the REST server for one network and contract group."""
    try:
        settings = build_settings(
            gateway_profile=gateway,
            identity=identity,
            wallet_path=wallet,
            network=network,
            contract=contract,
            local_metadata_file=localfile,
            output_file=outputfile,
            as_localhost=as_localhost,
            host=host,
            port=port,
            log_level=log_level,
        )
    except ValidationError as exc:
        err_console.print(f"[red]Invalid settings:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    configure_logging(level=settings.log_level, json_format=settings.log_json)

    from contractrest.api.app import create_app

    try:
        app = create_app(settings=settings)
    except ContractRestError as exc:
        raise fail(exc) from exc

    console.print(
        f"[bold green]Starting contractrest[/bold green] for "
        f"{settings.network}/{settings.contract} on {settings.host}:{settings.port}"
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
