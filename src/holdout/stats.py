# Copyright (c) Syntropy Systems
"""Streaming mean/standard deviation keyed by metric name."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

from holdout.models.report import MetricSummary

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class RunningStats:
    """Welford accumulator for one metric.

    Keeps count, mean and the sum of squared deviations, so memory does not
    grow with the number of observations. NaN observations are counted in
    `skipped` and otherwise ignored.
    """

    count: int
    skipped: int
    _mean: float
    _m2: float

    def __init__(self) -> None:
        self.count = 0
        self.skipped = 0
        self._mean = 0.0
        self._m2 = 0.0

    def push(self, value: float) -> None:
        """Fold one observation into the accumulator."""
        value = float(value)
        if math.isnan(value):
            self.skipped += 1
            return

        self.count += 1
        delta = value - self._mean
        self._mean += delta / self.count
        self._m2 += delta * (value - self._mean)

    def extend(self, values: Iterable[float]) -> None:
        """Fold several observations, in order."""
        for value in values:
            self.push(value)

    @property
    def mean(self) -> float:
        """Mean of the observations, NaN when there are none."""
        if self.count == 0:
            return math.nan
        return self._mean

    @property
    def variance(self) -> float:
        """Sample (n - 1) variance. Zero for one observation, NaN for none."""
        if self.count == 0:
            return math.nan
        if self.count == 1:
            return 0.0
        return self._m2 / (self.count - 1)

    @property
    def stddev(self) -> float:
        """Sample standard deviation."""
        return math.sqrt(self.variance)

    def summary(self) -> MetricSummary:
        """Return the current mean/stddev as a report value."""
        return MetricSummary(
            mean=self.mean,
            stddev=self.stddev,
            count=self.count,
            skipped=self.skipped,
        )


class RunningStatsRegistry:
    """Ordered mapping of metric name to RunningStats.

    Accumulators are created on first use, so metric names built at run time
    (e.g. "<label>_precision") need no declaration. Iteration follows the
    order in which names were first recorded.
    """

    _stats: dict[str, RunningStats]

    def __init__(self) -> None:
        self._stats = {}

    def record(self, name: str, value: float) -> None:
        """Fold value into the accumulator for name, creating it if needed."""
        stats = self._stats.get(name)
        if stats is None:
            stats = RunningStats()
            self._stats[name] = stats
        stats.push(value)

    def record_many(self, samples: Iterable[tuple[str, float]]) -> None:
        """Record (name, value) pairs in order."""
        for name, value in samples:
            self.record(name, value)

    def get(self, name: str) -> RunningStats | None:
        """Return the accumulator for name, if any."""
        return self._stats.get(name)

    def names(self) -> list[str]:
        """Return metric names in first-registration order."""
        return list(self._stats)

    def snapshot(self) -> dict[str, MetricSummary]:
        """Return the current mean/stddev of every metric, in order."""
        return {name: stats.summary() for name, stats in self._stats.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._stats

    def __len__(self) -> int:
        return len(self._stats)

    def __iter__(self) -> Iterator[str]:
        return iter(self._stats)
