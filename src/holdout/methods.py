# Copyright (c) Syntropy Systems
"""Classification methods evaluated by the harness.

The harness only relies on the Model protocol. The classifiers below are
scikit-learn estimators provisioned by name through get_all().
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

import numpy as np
from sklearn.dummy import DummyClassifier
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import NearestCentroid

from holdout.errors import ConfigurationError
from holdout.models.state import TrainedState

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from holdout.dataset import Dataset
    from holdout.models.base import JSONObject

logger = logging.getLogger(__name__)


@runtime_checkable
class Model(Protocol):
    """Capabilities the harness needs from a classification method."""

    name: str

    def fit(self, training: Dataset, rng: np.random.Generator) -> None:
        ...

    def predict(self, testing: Dataset) -> np.ndarray:
        ...

    def save(self, identifier: str) -> None:
        ...

    def delete(self) -> None:
        ...


def utcnow() -> str:
    """Get current UTC time as ISO format string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class ModelStore:
    """Directory of trained states, one JSON file per identifier."""

    root: Path

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, identifier: str) -> Path:
        """Get the file path for an identifier."""
        if not identifier or "/" in identifier or "\\" in identifier:
            msg = f"Invalid model identifier: {identifier!r}"
            raise ValueError(msg)
        return self.root / f"{identifier}.json"

    def write(self, state: TrainedState) -> Path:
        """Write a state, replacing any earlier state with the same identifier."""
        path = self.path_for(state.identifier)
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(state.model_dump_json(indent=2))
        return path

    def read(self, identifier: str) -> TrainedState:
        """Read a stored state.

        Raises FileNotFoundError if nothing was saved under identifier.
        """
        path = self.path_for(identifier)
        return TrainedState.model_validate_json(path.read_text())

    def remove(self, identifier: str) -> bool:
        """Remove a stored state. Returns False if there was none."""
        path = self.path_for(identifier)
        if not path.exists():
            return False
        path.unlink()
        return True


class BaseClassifier:
    """Shared fit/predict/save/delete plumbing around a scikit-learn estimator.

    Subclasses implement _build, which returns a fresh unfitted estimator for
    a trial, and _params, which describes the fitted estimator for saving.
    """

    name: ClassVar[str] = ""
    store: ModelStore | None
    labels_: list[str]
    n_features_: int | None
    _estimator: Any
    _saved: list[str]

    def __init__(self, store: ModelStore | None = None) -> None:
        self.store = store
        self.labels_ = []
        self.n_features_ = None
        self._estimator = None
        self._saved = []

    @property
    def estimator(self) -> Any:
        """The fitted estimator."""
        if self._estimator is None:
            msg = f"{self.name} must be fitted first"
            raise RuntimeError(msg)
        return self._estimator

    def fit(self, training: Dataset, rng: np.random.Generator) -> None:
        """Train on a dataset."""
        if len(training) == 0:
            msg = "Cannot fit on an empty training set"
            raise ValueError(msg)

        self._estimator = None
        self.n_features_ = None
        estimator = self._build(rng)
        estimator.fit(training.features, training.labels)

        self._estimator = estimator
        self.labels_ = list(training.label_set)
        self.n_features_ = training.n_features

    def predict(self, testing: Dataset) -> np.ndarray:
        """Predict one label per record of a dataset."""
        if self.n_features_ is None:
            msg = f"{self.name} must be fitted before predicting"
            raise RuntimeError(msg)
        if testing.n_features != self.n_features_:
            msg = (
                f"{self.name} was fitted on {self.n_features_} features, "
                f"got {testing.n_features}"
            )
            raise ValueError(msg)
        if len(testing) == 0:
            return np.empty(0, dtype=str)
        return np.asarray(self.estimator.predict(testing.features))

    def save(self, identifier: str) -> None:
        """Persist the trained state under identifier (last write wins)."""
        if self.store is None:
            logger.debug("No model store configured; not saving %s", identifier)
            return
        if self.n_features_ is None:
            msg = f"{self.name} must be fitted before saving"
            raise RuntimeError(msg)

        state = TrainedState(
            identifier=identifier,
            method=self.name,
            saved_at=utcnow(),
            n_features=self.n_features_,
            labels=self.labels_,
            params=self._params(),
        )
        path = self.store.write(state)
        if identifier not in self._saved:
            self._saved.append(identifier)
        logger.debug("Saved %s to %s", identifier, path)

    def delete(self) -> None:
        """Remove every state this instance saved."""
        if self.store is not None:
            for identifier in self._saved:
                _ = self.store.remove(identifier)
        self._saved = []

    def _build(self, rng: np.random.Generator) -> Any:
        raise NotImplementedError

    def _params(self) -> JSONObject:
        raise NotImplementedError


def _labels(classes: np.ndarray) -> list[str]:
    return [str(c) for c in classes]


class MajorityClassifier(BaseClassifier):
    """Predicts the most frequent training label; ties go to the first label."""

    name: ClassVar[str] = "majority"

    def _build(self, rng: np.random.Generator) -> DummyClassifier:
        return DummyClassifier(strategy="most_frequent")

    def _params(self) -> JSONObject:
        est = self.estimator
        # classes_ is sorted and argmax takes the first maximum
        return {"label": str(est.classes_[int(np.argmax(est.class_prior_))])}


class StratifiedRandomClassifier(BaseClassifier):
    """Draws labels at random with the training label frequencies.

    The estimator's random_state is drawn from the generator handed to fit(),
    so a trial's predictions are reproducible from its seed.
    """

    name: ClassVar[str] = "stratified"

    def _build(self, rng: np.random.Generator) -> DummyClassifier:
        seed = int(rng.integers(np.iinfo(np.int32).max))
        return DummyClassifier(strategy="stratified", random_state=seed)

    def _params(self) -> JSONObject:
        est = self.estimator
        return {
            "classes": _labels(est.classes_),
            "priors": [float(p) for p in est.class_prior_],
            "random_state": est.random_state,
        }


class NearestCentroidClassifier(BaseClassifier):
    """Assigns each record the label of the closest class mean (Euclidean)."""

    name: ClassVar[str] = "nearest_centroid"

    def _build(self, rng: np.random.Generator) -> NearestCentroid:
        return NearestCentroid()

    def _params(self) -> JSONObject:
        est = self.estimator
        return {
            "classes": _labels(est.classes_),
            "centroids": est.centroids_.tolist(),
        }


class GaussianNaiveBayes(BaseClassifier):
    """Gaussian naive Bayes with variance smoothing."""

    name: ClassVar[str] = "gaussian_nb"
    var_smoothing: float = 1e-9

    def _build(self, rng: np.random.Generator) -> GaussianNB:
        return GaussianNB(var_smoothing=self.var_smoothing)

    def _params(self) -> JSONObject:
        est = self.estimator
        return {
            "classes": _labels(est.classes_),
            "priors": est.class_prior_.tolist(),
            "means": est.theta_.tolist(),
            "vars": est.var_.tolist(),
        }


METHODS: dict[str, type[BaseClassifier]] = {
    cls.name: cls
    for cls in (
        MajorityClassifier,
        StratifiedRandomClassifier,
        NearestCentroidClassifier,
        GaussianNaiveBayes,
    )
}


def available_methods() -> list[str]:
    """Return the names of all registered methods."""
    return list(METHODS)


def get_all(
    names: Sequence[str] | None = None,
    store: ModelStore | None = None,
) -> list[BaseClassifier]:
    """Instantiate methods by name, in the given order.

    With no names, every registered method is returned.
    """
    selected = list(names) if names else available_methods()
    unknown = [name for name in selected if name not in METHODS]
    if unknown:
        msg = (
            f"Unknown method(s): {', '.join(unknown)}. "
            f"Available: {', '.join(available_methods())}"
        )
        raise ConfigurationError(msg)
    return [METHODS[name](store=store) for name in selected]
