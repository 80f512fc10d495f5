# Copyright (c) Syntropy Systems
"""Tests for running statistics."""

import math

import numpy as np
import pytest

from holdout.stats import RunningStats, RunningStatsRegistry


class TestRunningStats:
    """Tests for the Welford accumulator."""

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    @pytest.mark.parametrize("size", [2, 3, 10, 1000])
    def test_matches_batch_statistics(self, seed: int, size: int) -> None:
        """Test streaming mean/stddev equal batch mean/stddev."""
        values = np.random.default_rng(seed).normal(50.0, 12.0, size=size)
        stats = RunningStats()
        stats.extend(values.tolist())

        assert stats.count == size
        assert stats.mean == pytest.approx(float(np.mean(values)), rel=1e-9)
        assert stats.stddev == pytest.approx(float(np.std(values, ddof=1)), rel=1e-9)

    def test_large_offset(self) -> None:
        """Test precision with values far from zero."""
        values = [1e9 + 4, 1e9 + 7, 1e9 + 13, 1e9 + 16]
        stats = RunningStats()
        stats.extend(values)

        assert stats.mean == pytest.approx(1e9 + 10, rel=1e-12)
        assert stats.variance == pytest.approx(30.0, rel=1e-9)

    def test_single_observation(self) -> None:
        """Test one observation has zero spread."""
        stats = RunningStats()
        stats.push(42.0)
        assert stats.mean == 42.0
        assert stats.stddev == 0.0

    def test_no_observations(self) -> None:
        """Test an empty accumulator reports NaN."""
        stats = RunningStats()
        assert math.isnan(stats.mean)
        assert math.isnan(stats.stddev)

    def test_nan_is_skipped(self) -> None:
        """Test NaN does not corrupt the running mean."""
        stats = RunningStats()
        stats.extend([10.0, math.nan, 20.0, math.nan])

        assert stats.count == 2
        assert stats.skipped == 2
        assert stats.mean == 15.0

    def test_constant_values(self) -> None:
        """Test identical observations give exactly zero stddev."""
        stats = RunningStats()
        stats.extend([50.0, 50.0, 50.0])
        assert stats.stddev == 0.0

    def test_summary(self) -> None:
        """Test summary carries mean, stddev and counts."""
        stats = RunningStats()
        stats.extend([1.0, 3.0, math.nan])
        summary = stats.summary()

        assert summary.mean == 2.0
        assert summary.stddev == pytest.approx(math.sqrt(2.0))
        assert summary.count == 2
        assert summary.skipped == 1
        assert summary.format() == "2.00 ± 1.41"


class TestRunningStatsRegistry:
    """Tests for the metric-name registry."""

    def test_lazy_registration_order(self) -> None:
        """Test names are kept in first-recorded order."""
        registry = RunningStatsRegistry()
        registry.record("training_time", 1.0)
        registry.record("accuracy", 90.0)
        registry.record("training_time", 3.0)
        registry.record("spam_precision", 80.0)

        assert registry.names() == ["training_time", "accuracy", "spam_precision"]
        assert list(registry.snapshot()) == registry.names()
        assert len(registry) == 3
        assert "accuracy" in registry
        assert "ham_recall" not in registry

    def test_snapshot_values(self) -> None:
        """Test snapshot reports per-metric mean/stddev."""
        registry = RunningStatsRegistry()
        registry.record_many([("accuracy", 90.0), ("accuracy", 92.0)])

        snapshot = registry.snapshot()
        assert snapshot["accuracy"].mean == 91.0
        assert snapshot["accuracy"].stddev == pytest.approx(math.sqrt(2.0))

    def test_runtime_metric_names(self) -> None:
        """Test names built from labels at run time register on the fly."""
        registry = RunningStatsRegistry()
        for label in ("ham", "spam", "phish"):
            registry.record(f"{label}_recall", 100.0)
        assert registry.names() == ["ham_recall", "spam_recall", "phish_recall"]

    def test_nan_only_metric(self) -> None:
        """Test a metric that was never defined reports NaN."""
        registry = RunningStatsRegistry()
        registry.record("spam_precision", math.nan)

        summary = registry.snapshot()["spam_precision"]
        assert math.isnan(summary.mean)
        assert summary.format() == "nan ± nan"
        stats = registry.get("spam_precision")
        assert stats is not None
        assert stats.skipped == 1
