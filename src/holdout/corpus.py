# Copyright (c) Syntropy Systems
"""Data set discovery and loading from corpus folders.

A corpus folder is named after its feature count (e.g. `spam/8`) and holds
one CSV file per class (`ham`, `spam`), one record per line.
"""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from holdout.dataset import Dataset
from holdout.errors import ConfigurationError, DataLoadError

logger = logging.getLogger(__name__)

CLASS_FILES = ("ham", "spam")
EMPTY_SET_NAME = "empty"


def feature_count(folder: Path) -> int | None:
    """Return the feature count implied by a folder name, or None."""
    name = folder.name
    if not name.isdigit():
        return None
    count = int(name)
    return count if count > 0 else None


def is_corpus_folder(folder: Path) -> bool:
    """Check whether folder looks like a corpus folder."""
    return (
        folder.is_dir()
        and feature_count(folder) is not None
        and all((folder / class_file).is_file() for class_file in CLASS_FILES)
    )


def discover_folders(base: Path) -> list[Path]:
    """Find every corpus folder at or below base, sorted by path."""
    if not base.is_dir():
        msg = f"The specified data set folder is invalid: {base}"
        raise ConfigurationError(msg)

    candidates = [base, *base.rglob("*")]
    folders = sorted(p for p in candidates if is_corpus_folder(p))
    logger.info("Found %d data set folder(s) under %s", len(folders), base)
    return folders


def dataset_label(folder: Path, base: Path) -> str:
    """Return folder's path relative to base, as used in report rows."""
    try:
        relative = folder.relative_to(base).as_posix()
    except ValueError:
        return folder.as_posix()
    return folder.name if relative == "." else relative


def _read_rows(path: Path, n_features: int) -> np.ndarray:
    rows: list[list[float]] = []
    with path.open("r", encoding="utf-8") as f:
        for i, line in enumerate(f, start=1):
            line = line.strip()  # noqa: PLW2901
            if not line:
                continue
            parts = [p.strip() for p in line.split(",")]
            if len(parts) != n_features:
                msg = f"{path}:{i} expected {n_features} values, got {len(parts)}"
                raise DataLoadError(msg, folder=path.parent)
            try:
                rows.append([float(p) for p in parts])
            except ValueError as e:
                msg = f"{path}:{i} non-numeric value: {e}"
                raise DataLoadError(msg, folder=path.parent) from e
    return np.asarray(rows, dtype=np.float64).reshape(len(rows), n_features)


def load_dataset(folder: Path) -> Dataset:
    """Load a corpus folder into a Dataset labelled by class file name.

    Raises:
        DataLoadError: if a class file is missing or malformed, or the folder
            holds no records at all

    """
    n_features = feature_count(folder)
    if n_features is None:
        msg = f"{folder}: folder name must be a positive feature count"
        raise DataLoadError(msg, folder=folder)

    blocks: list[np.ndarray] = []
    labels: list[str] = []
    for class_file in CLASS_FILES:
        path = folder / class_file
        try:
            block = _read_rows(path, n_features)
        except OSError as e:
            msg = f"{path}: {e.strerror or e}"
            raise DataLoadError(msg, folder=folder) from e
        except UnicodeDecodeError as e:
            msg = f"{path}: not a text file"
            raise DataLoadError(msg, folder=folder) from e
        blocks.append(block)
        labels.extend([class_file] * block.shape[0])

    if not labels:
        msg = f"{folder}: no records found"
        raise DataLoadError(msg, folder=folder)

    logger.debug("Loaded %d records from %s", len(labels), folder)
    return Dataset(
        features=np.vstack(blocks),
        labels=np.asarray(labels),
        name=folder.name,
        label_set=CLASS_FILES,
    )


def build_empty_set(n_features: int, label: str = "spam", count: int = 1) -> Dataset:
    """Build the augmentation set of all-zero feature vectors.

    Ids are negative so they never collide with ids of loaded records.
    """
    if count < 0:
        msg = f"count must be non-negative, got {count}"
        raise ValueError(msg)
    return Dataset(
        features=np.zeros((count, n_features)),
        labels=np.full(count, label),
        ids=-np.arange(1, count + 1, dtype=np.int64),
        name=EMPTY_SET_NAME,
        label_set=(label,),
    )
