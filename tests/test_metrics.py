# Copyright (c) Syntropy Systems
"""Tests for per-trial metric extraction."""

import math

import numpy as np
import pytest

from holdout.dataset import Dataset
from holdout.metrics import TrialMetrics, extract


def _testing(labels: list[str], label_set: tuple[str, ...] = ()) -> Dataset:
    return Dataset(
        features=np.zeros((len(labels), 2)),
        labels=np.array(labels),
        label_set=label_set,
    )


class TestExtract:
    """Tests for extract()."""

    def test_perfect_predictions(self) -> None:
        """Test all metrics are 100 when every prediction is right."""
        testing = _testing(["ham", "spam", "spam"])
        metrics = extract(testing, ["ham", "spam", "spam"])

        assert metrics.accuracy == 100.0
        assert metrics.precision == {"ham": 100.0, "spam": 100.0}
        assert metrics.recall == {"ham": 100.0, "spam": 100.0}

    def test_mixed_predictions(self) -> None:
        """Test precision and recall per class."""
        testing = _testing(["ham", "ham", "spam", "spam"])
        metrics = extract(testing, ["ham", "spam", "spam", "spam"])

        assert metrics.accuracy == 75.0
        assert metrics.precision["ham"] == 100.0
        assert metrics.precision["spam"] == pytest.approx(200.0 / 3.0)
        assert metrics.recall["ham"] == 50.0
        assert metrics.recall["spam"] == 100.0

    def test_absent_class_recall_is_nan(self) -> None:
        """Test a class with no actual records has undefined recall."""
        testing = _testing(["ham", "ham"], label_set=("ham", "spam"))
        metrics = extract(testing, ["ham", "spam"])

        assert math.isnan(metrics.recall["spam"])
        assert metrics.precision["spam"] == 0.0
        assert metrics.recall["ham"] == 50.0

    def test_never_predicted_class_precision_is_nan(self) -> None:
        """Test a class never predicted has undefined precision."""
        testing = _testing(["ham", "spam"])
        metrics = extract(testing, ["ham", "ham"])

        assert math.isnan(metrics.precision["spam"])
        assert metrics.recall["spam"] == 0.0

    def test_predicted_label_outside_truth(self) -> None:
        """Test labels only seen in predictions still get metrics."""
        testing = _testing(["ham"])
        metrics = extract(testing, ["phish"])

        assert metrics.accuracy == 0.0
        assert metrics.precision["phish"] == 0.0
        assert math.isnan(metrics.recall["phish"])

    @pytest.mark.parametrize("seed", range(5))
    def test_bounds(self, seed: int) -> None:
        """Test every value is within [0, 100] or NaN."""
        rng = np.random.default_rng(seed)
        truth = rng.choice(["ham", "spam"], size=25).tolist()
        predicted = rng.choice(["ham", "spam"], size=25)
        metrics = extract(_testing(truth), predicted)

        for _, value in metrics.as_samples():
            assert math.isnan(value) or 0.0 <= value <= 100.0

    def test_length_mismatch(self) -> None:
        """Test a prediction count mismatch is an error."""
        with pytest.raises(ValueError, match="predictions"):
            _ = extract(_testing(["ham", "spam"]), ["ham"])

    def test_empty_testing_set(self) -> None:
        """Test accuracy is undefined without records."""
        metrics = extract(_testing([], label_set=("ham",)), np.array([], dtype=str))
        assert math.isnan(metrics.accuracy)
        assert math.isnan(metrics.precision["ham"])


class TestTrialMetrics:
    """Tests for TrialMetrics."""

    def test_sample_order(self) -> None:
        """Test samples follow accuracy, precisions, recalls."""
        metrics = TrialMetrics(
            accuracy=90.0,
            precision={"ham": 95.0, "spam": 85.0},
            recall={"ham": 88.0, "spam": 92.0},
        )
        names = [name for name, _ in metrics.as_samples()]
        assert names == [
            "accuracy",
            "ham_precision",
            "spam_precision",
            "ham_recall",
            "spam_recall",
        ]
