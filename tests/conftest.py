# Copyright (c) Syntropy Systems
"""Pytest fixtures for holdout tests."""

import logging
import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import pytest

from holdout.dataset import Dataset

# Store original cwd at module load time
_original_cwd = Path.cwd()


class StubModel:
    """Majority-label model that records how the harness drives it.

    fail_on_fit / fail_on_predict name the (1-based) call that raises.
    """

    def __init__(
        self,
        name: str = "stub",
        fail_on_fit: int | None = None,
        fail_on_predict: int | None = None,
    ) -> None:
        self.name = name
        self.fail_on_fit = fail_on_fit
        self.fail_on_predict = fail_on_predict
        self.fit_calls = 0
        self.predict_calls = 0
        self.saved: list[str] = []
        self.deleted = 0
        self.training_sets: list[Dataset] = []
        self.testing_sets: list[Dataset] = []
        self.training_ids: list[set[int]] = []
        self.testing_sizes: list[int] = []
        self.label: str | None = None

    def fit(self, training: Dataset, rng: np.random.Generator) -> None:
        self.fit_calls += 1
        self.training_sets.append(training)
        self.training_ids.append(training.id_set())
        if self.fail_on_fit == self.fit_calls:
            msg = "fit exploded"
            raise RuntimeError(msg)
        values, counts = np.unique(training.labels, return_counts=True)
        self.label = str(values[int(np.argmax(counts))])

    def predict(self, testing: Dataset) -> np.ndarray:
        self.predict_calls += 1
        self.testing_sets.append(testing)
        self.testing_sizes.append(len(testing))
        if self.fail_on_predict == self.predict_calls:
            msg = "predict exploded"
            raise RuntimeError(msg)
        return np.full(len(testing), self.label)

    def save(self, identifier: str) -> None:
        self.saved.append(identifier)

    def delete(self) -> None:
        self.deleted += 1


def make_dataset(
    n_per_class: int = 50,
    n_features: int = 4,
    seed: int = 0,
    separation: float = 3.0,
) -> Dataset:
    """Build a balanced ham/spam dataset; spam is shifted by `separation`."""
    rng = np.random.default_rng(seed)
    ham = rng.normal(0.0, 1.0, size=(n_per_class, n_features))
    spam = rng.normal(separation, 1.0, size=(n_per_class, n_features))
    return Dataset(
        features=np.vstack([ham, spam]),
        labels=np.array(["ham"] * n_per_class + ["spam"] * n_per_class),
        name="balanced",
    )


def write_corpus_folder(
    folder: Path,
    n_features: int,
    n_per_class: int = 20,
    seed: int = 0,
) -> Path:
    """Write ham/spam CSV files for a separable corpus folder."""
    folder.mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(seed)
    for label, center in (("ham", 0.0), ("spam", 5.0)):
        rows = rng.normal(center, 1.0, size=(n_per_class, n_features))
        lines = [",".join(f"{v:.6f}" for v in row) for row in rows]
        _ = (folder / label).write_text("\n".join(lines) + "\n")
    return folder


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def holdout_project(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary holdout project directory."""
    holdout_dir = temp_dir / ".holdout"
    holdout_dir.mkdir()
    (holdout_dir / "models").mkdir()

    # Change to temp directory
    os.chdir(temp_dir)

    yield temp_dir

    # Always return to original cwd
    os.chdir(_original_cwd)


@pytest.fixture
def corpus_root(temp_dir: Path) -> Path:
    """Create a corpus with two data set folders."""
    root = temp_dir / "corpus"
    write_corpus_folder(root / "4", n_features=4, seed=1)
    write_corpus_folder(root / "8", n_features=8, seed=2)
    return root


@pytest.fixture
def balanced_dataset() -> Dataset:
    """100 records, 50 ham and 50 spam."""
    return make_dataset()


@pytest.fixture
def stub_model() -> Callable[..., StubModel]:
    """Factory for StubModel instances."""
    return StubModel


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Drop handlers the CLI installs on the root logger."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def dataset_factory() -> Callable[..., Dataset]:
    """Factory for balanced ham/spam datasets."""
    return make_dataset


@pytest.fixture
def corpus_factory() -> Callable[..., Path]:
    """Factory writing corpus folders."""
    return write_corpus_folder
