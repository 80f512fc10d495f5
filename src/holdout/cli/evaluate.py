# Copyright (c) Syntropy Systems
"""holdout evaluate command."""
from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from holdout.config import (
    get_store_dir,
    load_config,
    parse_flag,
    parse_repetitions,
    resolve_data_root,
)
from holdout.corpus import discover_folders
from holdout.errors import ConfigurationError, SequenceExhaustedError
from holdout.harness import EvaluationHarness
from holdout.log import configure_logging
from holdout.methods import ModelStore, get_all
from holdout.models.report import RunOutcome
from holdout.report import ReportRenderer

# stdout carries the report; everything for humans goes to stderr
console = Console(stderr=True)


def _print_failures(outcome: RunOutcome) -> None:
    table = Table(title="Failed pairs")
    table.add_column("Folder")
    table.add_column("Method", style="cyan")
    table.add_column("Stage")
    table.add_column("Trial", justify="right")
    table.add_column("Error", style="red")

    for failure in outcome.failures:
        table.add_row(
            failure.dataset,
            failure.method,
            failure.stage,
            "-" if failure.trial is None else str(failure.trial),
            escape(failure.message),
        )

    console.print(table)


def evaluate(  # noqa: PLR0913
    data_set_folder: str = typer.Argument(
        ...,
        metavar="DATA_SET_FOLDER",
        help="Folder searched for corpus folders (named by feature count)",
    ),
    repetitions: str = typer.Argument(
        ...,
        metavar="NUMBER_OF_REPETITIONS",
        help="Trials per (method, data set) pair",
    ),
    include_empty: str = typer.Argument(
        ...,
        metavar="TEST_EMPTY_INSTANCES",
        help="Append empty instances to every testing set (true/false)",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config", "-c",
        help="Config file (default: nearest .holdout/config.yaml)",
    ),
    ratio: float | None = typer.Option(
        None,
        "--ratio", "-r",
        help="Fraction of each label used for training",
    ),
    method: list[str] | None = typer.Option(
        None,
        "--method", "-m",
        help="Method to evaluate (repeatable; default: all)",
    ),
    seed_floor: int | None = typer.Option(
        None,
        "--seed-floor",
        help="First trial seed is the smallest prime >= this value",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log progress to stderr",
    ),
) -> None:
    """Evaluate methods over every data set with repeated holdout trials.

    Prints a tab-separated report to stdout: one header line, then one
    'mean ± stddev' row per (data set, method) pair.

    Example:
        holdout evaluate data/spam 10 false

    """
    configure_logging(verbose)

    try:
        base = resolve_data_root(data_set_folder)
        config = replace(
            load_config(config_file),
            repetitions=parse_repetitions(repetitions),
            include_empty=parse_flag(include_empty),
        )
        if ratio is not None:
            config.ratio = ratio
        if method:
            config.methods = list(method)
        if seed_floor is not None:
            config.seed_floor = seed_floor
        config.validate()

        models = get_all(config.methods, ModelStore(get_store_dir(config)))
        folders = discover_folders(base)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if not folders:
        console.print(f"[red]Error:[/red] No data set folders found in {base}")
        raise typer.Exit(1)

    harness = EvaluationHarness(config, ReportRenderer())
    try:
        outcome = harness.run(models, folders, base)
    except SequenceExhaustedError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if not outcome.ok:
        _print_failures(outcome)
        raise typer.Exit(1)
