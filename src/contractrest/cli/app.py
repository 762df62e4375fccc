"""
Root Typer application for the contractrest CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="contractrest",
    help="contractrest — REST server synthesized from smart-contract metadata.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("contractrest")
        except PackageNotFoundError:
            v = "unknown"
        typer.echo(f"contractrest {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """contractrest CLI — serve a ledger over REST, or print its interface document."""


# ── Command registration ─────────────────────────────────────────────────

from contractrest.cli.openapi import openapi  # noqa: E402
from contractrest.cli.serve import serve  # noqa: E402

app.command("serve")(serve)
app.command("openapi")(openapi)
