# Copyright (c) Syntropy Systems
"""Main CLI entry point for holdout."""

import typer

from holdout.cli.evaluate import evaluate
from holdout.cli.init_cmd import init
from holdout.cli.methods import methods

app = typer.Typer(
    name="holdout",
    help=(
        "Repeated-holdout evaluation of classification methods. "
        "Seed, split, fit, score, repeat."
    ),
    no_args_is_help=True,
    add_completion=False,
)

# Register commands
_ = app.command()(init)
_ = app.command()(evaluate)
_ = app.command()(methods)


if __name__ == "__main__":
    app()
