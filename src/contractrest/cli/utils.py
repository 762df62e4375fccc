"""
CLI utility helpers — consoles and error reporting.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from contractrest.core.errors import ContractRestError

console = Console()
err_console = Console(stderr=True)


def fail(exc: ContractRestError) -> typer.Exit:
    """Print *exc* to stderr and return the exit to raise."""
    err_console.print(f"[red]Error:[/red] {escape(exc.message)}")
    context = exc.context.to_dict()
    if context:
        err_console.print(f"[dim]{escape(str(context))}[/dim]")
    return typer.Exit(code=1)
