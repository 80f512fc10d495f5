# Copyright (c) Syntropy Systems
"""Repeated-holdout evaluation of methods over datasets."""
from __future__ import annotations

import logging
import time
from contextlib import ExitStack
from typing import TYPE_CHECKING

import numpy as np

from holdout.corpus import build_empty_set, dataset_label, load_dataset
from holdout.errors import DataLoadError, SequenceExhaustedError, TrialExecutionError
from holdout.metrics import extract
from holdout.models.report import PairFailure, ReportRow, RunOutcome
from holdout.partition import augment, split
from holdout.primes import PrimeSequencer
from holdout.report import ReportRenderer
from holdout.stats import RunningStatsRegistry

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from pathlib import Path

    from holdout.config import HoldoutConfig
    from holdout.dataset import Dataset
    from holdout.methods import Model

logger = logging.getLogger(__name__)

TRAINING_TIME = "training_time"
TESTING_TIME = "testing_time"


class EvaluationHarness:
    """Runs N seeded train/test trials per (method, dataset) pair.

    Each pair gets a fresh PrimeSequencer starting at config.seed_floor, so
    every method is scored on the same sequence of partitions of a dataset.
    A trial's seed drives both the split and the generator passed to fit().
    """

    config: HoldoutConfig
    renderer: ReportRenderer
    _loader: Callable[[Path], Dataset]
    _clock: Callable[[], float]

    def __init__(
        self,
        config: HoldoutConfig,
        renderer: ReportRenderer | None = None,
        *,
        loader: Callable[[Path], Dataset] = load_dataset,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Initialize a harness.

        Args:
            config: Run configuration
            renderer: Report output; defaults to stdout
            loader: Turns a data set folder into a Dataset
            clock: Monotonic clock in seconds used to time fit/predict

        """
        self.config = config
        self.renderer = renderer or ReportRenderer()
        self._loader = loader
        self._clock = clock

    def new_sequencer(self) -> PrimeSequencer:
        """Create the seed sequencer for one pair."""
        return PrimeSequencer(floor=self.config.seed_floor, limit=self.config.seed_limit)

    def identifier_for(self, model: Model) -> str:
        """Get the name a method's trained state is saved under."""
        return f"{self.config.namespace}@{model.name}"

    def run_trial(  # noqa: PLR0913
        self,
        model: Model,
        dataset: Dataset,
        registry: RunningStatsRegistry,
        *,
        seed: int,
        trial: int,
        label: str,
        augmentation: Dataset | None = None,
    ) -> None:
        """Run one split/fit/predict/score cycle and record its metrics.

        The trial's partitions are closed on every exit path.

        Raises:
            TrialExecutionError: if the model fails to fit, save or predict,
                or returns predictions that cannot be scored

        """
        def failed(stage: str, exc: Exception) -> TrialExecutionError:
            return TrialExecutionError(
                f"{type(exc).__name__}: {exc}",
                dataset=label,
                method=model.name,
                trial=trial,
                stage=stage,
            )

        with ExitStack() as stack:
            training, testing = split(dataset, self.config.ratio, seed)
            _ = stack.enter_context(training)
            _ = stack.enter_context(testing)

            augmented = augment(testing, augmentation)
            if augmented is not testing:
                testing = stack.enter_context(augmented)

            rng = np.random.default_rng(seed)
            start = self._clock()
            try:
                model.fit(training, rng)
            except Exception as e:  # noqa: BLE001
                raise failed("fit", e) from e
            registry.record(TRAINING_TIME, (self._clock() - start) * 1000.0)

            try:
                model.save(self.identifier_for(model))
            except Exception as e:  # noqa: BLE001
                raise failed("save", e) from e

            start = self._clock()
            try:
                predictions = model.predict(testing)
            except Exception as e:  # noqa: BLE001
                raise failed("predict", e) from e
            registry.record(TESTING_TIME, (self._clock() - start) * 1000.0)

            try:
                metrics = extract(testing, predictions)
            except ValueError as e:
                raise failed("score", e) from e
            registry.record_many(metrics.as_samples())

            logger.debug(
                "Trial %d of %s on %s: %d training, %d testing records, "
                "accuracy %.2f",
                trial,
                model.name,
                label,
                len(training),
                len(testing),
                metrics.accuracy,
            )

    def evaluate(
        self,
        model: Model,
        dataset: Dataset,
        *,
        label: str,
        augmentation: Dataset | None = None,
    ) -> ReportRow:
        """Run all trials for one pair and aggregate them into a row.

        A failing trial aborts the pair; statistics of the completed trials
        are discarded with the registry.

        Raises:
            TrialExecutionError: if any trial fails
            SequenceExhaustedError: if the seed sequence runs out

        """
        registry = RunningStatsRegistry()
        sequencer = self.new_sequencer()
        repetitions = self.config.repetitions

        logger.info(
            "Evaluating %s on %s (%d trials)", model.name, label, repetitions
        )
        for trial in range(1, repetitions + 1):
            try:
                seed = sequencer.next()
            except SequenceExhaustedError as e:
                msg = f"{e} (dataset {label}, method {model.name}, trial {trial})"
                raise SequenceExhaustedError(msg) from e
            logger.debug(
                "Trial %d/%d of %s on %s uses seed %d",
                trial,
                repetitions,
                model.name,
                label,
                seed,
            )
            self.run_trial(
                model,
                dataset,
                registry,
                seed=seed,
                trial=trial,
                label=label,
                augmentation=augmentation,
            )

        return ReportRow(
            dataset=label,
            method=model.name,
            trials=repetitions,
            metrics=registry.snapshot(),
        )

    def run(
        self,
        models: Iterable[Model],
        folders: Sequence[Path],
        base: Path,
    ) -> RunOutcome:
        """Evaluate every method on every data set folder.

        Methods are the outer loop and folders the inner loop. Each row is
        rendered as soon as its pair completes. A folder that fails to load
        is skipped for that method; a pair whose trial fails produces no row.
        Both are recorded in the outcome and the run continues. Each
        method's saved state is deleted once its folders are done.

        Raises:
            SequenceExhaustedError: if the seed sequence runs out

        """
        outcome = RunOutcome()
        for model in models:
            try:
                for folder in folders:
                    row = self._evaluate_folder(model, folder, base, outcome)
                    if row is not None:
                        self.renderer.render(row)
                        outcome.rows.append(row)
            finally:
                model.delete()
        return outcome

    def _evaluate_folder(
        self,
        model: Model,
        folder: Path,
        base: Path,
        outcome: RunOutcome,
    ) -> ReportRow | None:
        label = dataset_label(folder, base)

        try:
            dataset = self._loader(folder)
        except DataLoadError as e:
            logger.error(  # noqa: TRY400
                "Skipping data set %s for method %s: %s", label, model.name, e
            )
            outcome.failures.append(
                PairFailure(dataset=label, method=model.name, stage="load", message=str(e))
            )
            return None

        with dataset:
            augmentation = None
            if self.config.include_empty:
                augmentation = build_empty_set(
                    dataset.n_features,
                    label=self.config.empty_label,
                    count=self.config.empty_count,
                )
            try:
                return self.evaluate(
                    model, dataset, label=label, augmentation=augmentation
                )
            except TrialExecutionError as e:
                logger.error("Aborted pair: %s", e)  # noqa: TRY400
                outcome.failures.append(
                    PairFailure(
                        dataset=label,
                        method=model.name,
                        stage=e.stage,
                        trial=e.trial,
                        message=str(e),
                    )
                )
                return None
            finally:
                if augmentation is not None:
                    augmentation.close()
