"""
CLI: ``contractrest openapi`` — generate the interface document offline.

Runs the same synthesis pass as the server against a metadata file, so the
document can be produced without a ledger connection.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer

from contractrest.backend.memory import InMemoryBackend
from contractrest.cli.utils import console, fail
from contractrest.core.errors import ContractRestError
from contractrest.metadata.models import DEFAULT_MUTATING_TAG
from contractrest.openapi.document import build_document, write_document
from contractrest.routing.synthesizer import synthesize


def generate_document(
    metadata_file: Path,
    *,
    network: str,
    contract: str,
    title: str = "contractrest",
    version: str = "0.1.0",
    mutating_tag: str = DEFAULT_MUTATING_TAG,
) -> dict:
    backend = InMemoryBackend()
    backend.add_contract_group(network, contract, metadata_file.read_bytes())
    tree = asyncio.run(synthesize(backend, mutating_tag=mutating_tag))
    return build_document(tree.fragment, title=title, version=version)


def openapi(
    metadata_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Contract metadata JSON file"),
    network: str = typer.Option(..., "--network", "-n", help="Network (channel) name"),
    contract: str = typer.Option(..., "--contract", "-c", help="Contract group (chaincode) name"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
    title: str = typer.Option("contractrest", "--title", help="Document title"),
    api_version: str = typer.Option("0.1.0", "--api-version", help="Document version string"),
    mutating_tag: str = typer.Option(DEFAULT_MUTATING_TAG, "--mutating-tag", help="Tag marking mutating operations"),
) -> None:
    """Print (or write) the interface document for a metadata file."""
    try:
        document = generate_document(
            metadata_file,
            network=network,
            contract=contract,
            title=title,
            version=api_version,
            mutating_tag=mutating_tag,
        )
    except ContractRestError as exc:
        raise fail(exc) from exc

    if output is None:
        console.print_json(json.dumps(document))
        return

    path = write_document(document, output)
    console.print(f"[green]✓[/green] Wrote {len(document['paths'])} paths to {path}")
