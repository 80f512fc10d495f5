# Copyright (c) Syntropy Systems
"""holdout init command."""

from dataclasses import asdict
from pathlib import Path

import typer
import yaml
from rich.console import Console

from holdout.config import CONFIG_FILE, HoldoutConfig

console = Console()


def init(
    path: Path = typer.Argument(
        Path(),
        help="Directory to initialize (default: current directory)",
    ),
) -> None:
    """Initialize a new holdout project.

    Creates a .holdout directory with a default configuration and a model
    store.
    """
    target = path.resolve()
    holdout_dir = target / ".holdout"

    if holdout_dir.exists():
        console.print(f"[yellow]Already initialized:[/yellow] {holdout_dir}")
        return

    # Create directory structure
    holdout_dir.mkdir(parents=True)
    models_dir = holdout_dir / "models"
    models_dir.mkdir()

    # Create default config; store_dir stays implicit
    config = asdict(HoldoutConfig())
    del config["store_dir"]

    config_path = holdout_dir / CONFIG_FILE
    with config_path.open("w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    console.print(f"[green]Initialized holdout project:[/green] {holdout_dir}")
    console.print(f"  [dim]config:[/dim] {config_path}")
    console.print(f"  [dim]models:[/dim] {models_dir}")
