# Copyright (c) Syntropy Systems
"""Tab-separated report output."""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import TextIO

    from holdout.models.report import ReportRow

logger = logging.getLogger(__name__)

MISSING_CELL = "nan ± nan"


class ReportRenderer:
    """Writes one header line, then one line per (dataset, method) row.

    The header is taken from the metric order of the first row and printed
    exactly once. Later rows are aligned to it: a metric the row lacks is
    written as MISSING_CELL, a metric the header lacks is dropped.
    """

    _stream: TextIO | None
    _header: list[str] | None

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize a renderer.

        Args:
            stream: Destination; defaults to sys.stdout resolved at write time

        """
        self._stream = stream
        self._header = None

    @property
    def header(self) -> list[str] | None:
        """Metric names of the printed header, or None before the first row."""
        return None if self._header is None else list(self._header)

    def render(self, row: ReportRow) -> None:
        """Write a row, preceded by the header if none was written yet."""
        out = self._stream if self._stream is not None else sys.stdout

        if self._header is None:
            self._header = list(row.metrics)
            _ = out.write("\t".join(["folder", "method", *self._header]) + "\n")

        dropped = [name for name in row.metrics if name not in self._header]
        if dropped:
            logger.warning(
                "Metrics %s of %s on %s are not in the report header; dropped",
                ", ".join(dropped),
                row.method,
                row.dataset,
            )

        cells = [
            row.metrics[name].format() if name in row.metrics else MISSING_CELL
            for name in self._header
        ]
        _ = out.write("\t".join([row.dataset, row.method, *cells]) + "\n")
        out.flush()
