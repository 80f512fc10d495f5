# Copyright (c) Syntropy Systems
"""holdout methods command."""

from rich.console import Console
from rich.table import Table

from holdout.methods import METHODS

console = Console()


def methods() -> None:
    """List the classification methods available for evaluation."""
    table = Table(title="Methods")
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    for name, cls in METHODS.items():
        doc = (cls.__doc__ or "").strip().splitlines()
        table.add_row(name, doc[0] if doc else "")

    console.print(table)
