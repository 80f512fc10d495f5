# Copyright (c) Syntropy Systems
"""Pydantic models for aggregated evaluation results."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import HoldoutBaseModel

FailureStage = Literal["load", "fit", "save", "predict", "score"]


class MetricSummary(HoldoutBaseModel):
    """Mean and sample standard deviation of one metric across trials."""

    mean: float
    stddev: float
    count: int = 0
    skipped: int = 0

    def format(self) -> str:
        """Render as a 'mean ± stddev' cell with two decimals."""
        return f"{self.mean:.2f} ± {self.stddev:.2f}"


class ReportRow(HoldoutBaseModel):
    """Aggregated statistics for one (dataset, method) pair."""

    dataset: str
    method: str
    trials: int = 0
    metrics: dict[str, MetricSummary] = Field(default_factory=dict)


class PairFailure(HoldoutBaseModel):
    """A (dataset, method) pair that produced no row."""

    dataset: str
    method: str
    stage: FailureStage
    trial: int | None = None
    message: str


class RunOutcome(HoldoutBaseModel):
    """Rows and failures collected over a whole evaluation run."""

    rows: list[ReportRow] = Field(default_factory=list)
    failures: list[PairFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether every pair produced a row."""
        return not self.failures
