# Copyright (c) Syntropy Systems
"""Logging bootstrap for the holdout CLI."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False) -> None:  # noqa: FBT001, FBT002
    """Send log records to stderr so stdout carries only the report."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
