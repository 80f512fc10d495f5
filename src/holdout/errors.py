# Copyright (c) Syntropy Systems
"""Error types raised by holdout."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class HoldoutError(Exception):
    """Base class for holdout errors."""


class ConfigurationError(HoldoutError):
    """Invalid run configuration. Fatal before any evaluation starts."""


class DataLoadError(HoldoutError):
    """A data set folder could not be read or converted."""

    folder: Path | None

    def __init__(self, message: str, folder: Path | None = None) -> None:
        super().__init__(message)
        self.folder = folder


class TrialExecutionError(HoldoutError):
    """A method failed while fitting, saving or predicting during a trial.

    Carries the dataset, method and trial number that were active so the
    failure can be reported without the caller keeping extra state.
    """

    dataset: str
    method: str
    trial: int
    stage: str

    def __init__(
        self,
        message: str,
        *,
        dataset: str,
        method: str,
        trial: int,
        stage: str,
    ) -> None:
        super().__init__(
            f"{message} (dataset {dataset}, method {method}, trial {trial}, "
            f"stage {stage})"
        )
        self.dataset = dataset
        self.method = method
        self.trial = trial
        self.stage = stage


class SequenceExhaustedError(HoldoutError):
    """The seed sequence ran out before all trials completed."""


ExhaustedError = SequenceExhaustedError
