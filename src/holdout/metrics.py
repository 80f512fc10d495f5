# Copyright (c) Syntropy Systems
"""Classification metrics for a single trial."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Iterator

    from numpy.typing import ArrayLike

    from holdout.dataset import Dataset

ACCURACY = "accuracy"
PRECISION_SUFFIX = "_precision"
RECALL_SUFFIX = "_recall"


@dataclass
class TrialMetrics:
    """Scores of one trial, all scaled to percentages.

    Precision and recall are keyed by label. A value is NaN when it is
    undefined for that trial (no predicted or no actual positives).
    """

    accuracy: float
    precision: dict[str, float] = field(default_factory=dict)
    recall: dict[str, float] = field(default_factory=dict)

    def as_samples(self) -> Iterator[tuple[str, float]]:
        """Yield (metric name, value) pairs in registration order."""
        yield ACCURACY, self.accuracy
        for label, value in self.precision.items():
            yield f"{label}{PRECISION_SUFFIX}", value
        for label, value in self.recall.items():
            yield f"{label}{RECALL_SUFFIX}", value


def _ratio(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return math.nan
    return 100.0 * numerator / denominator


def extract(testing: Dataset, predictions: ArrayLike) -> TrialMetrics:
    """Score predictions against the true labels of a testing set.

    The label set covers the testing set's declared labels plus every label
    seen in either the truth or the predictions, in sorted order.
    """
    y_true = testing.labels
    y_pred = np.asarray(predictions).astype(str)

    if y_pred.shape != y_true.shape:
        msg = (
            f"expected {y_true.shape[0]} predictions, "
            f"got array of shape {y_pred.shape}"
        )
        raise ValueError(msg)

    labels = sorted(
        set(testing.label_set) | set(y_true.tolist()) | set(y_pred.tolist())
    )

    correct = int(np.sum(y_pred == y_true))
    metrics = TrialMetrics(accuracy=_ratio(correct, int(y_true.shape[0])))

    for label in labels:
        predicted = y_pred == label
        actual = y_true == label
        tp = int(np.sum(predicted & actual))
        metrics.precision[label] = _ratio(tp, int(np.sum(predicted)))
        metrics.recall[label] = _ratio(tp, int(np.sum(actual)))

    return metrics
