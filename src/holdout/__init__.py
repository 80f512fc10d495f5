"""
holdout - Repeated-holdout evaluation of classification methods.

Seed, split, fit, score, repeat; report mean ± stddev per metric.
"""

from holdout.dataset import Dataset
from holdout.harness import EvaluationHarness
from holdout.metrics import TrialMetrics, extract
from holdout.partition import augment, split
from holdout.primes import PrimeSequencer
from holdout.report import ReportRenderer
from holdout.stats import RunningStats, RunningStatsRegistry

__version__ = "0.1.0"
__all__ = [
    "Dataset",
    "EvaluationHarness",
    "PrimeSequencer",
    "ReportRenderer",
    "RunningStats",
    "RunningStatsRegistry",
    "TrialMetrics",
    "__version__",
    "augment",
    "extract",
    "split",
]
