# Copyright (c) Syntropy Systems
"""Seeded train/test partitioning of datasets."""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from holdout.dataset import Dataset


def split(dataset: Dataset, ratio: float, seed: int) -> tuple[Dataset, Dataset]:
    """Split a dataset into disjoint training and testing sets.

    The split is stratified: within every label the records are shuffled with
    a generator seeded by `seed` and the first round(n_label * ratio) of them
    go to training. Calling twice with the same dataset and seed returns the
    same partition.

    Args:
        dataset: Source records
        ratio: Fraction of each label assigned to training, 0 < ratio < 1
        seed: Seed for the shuffling generator

    Returns:
        (training, testing) datasets whose ids are disjoint and together
        cover the source ids

    """
    if not 0 < ratio < 1:
        msg = f"ratio must be strictly between 0 and 1, got {ratio}"
        raise ValueError(msg)

    rng = np.random.default_rng(seed)
    train_parts: list[np.ndarray] = []
    test_parts: list[np.ndarray] = []

    # np.unique sorts, so the shuffle order per label is stable for a seed
    for label in np.unique(dataset.labels):
        members = rng.permutation(np.flatnonzero(dataset.labels == label))
        n_train = int(round(len(members) * ratio))
        train_parts.append(members[:n_train])
        test_parts.append(members[n_train:])

    train_idx = _shuffled(rng, train_parts)
    test_idx = _shuffled(rng, test_parts)
    return dataset.take(train_idx), dataset.take(test_idx)


def _shuffled(rng: np.random.Generator, parts: list[np.ndarray]) -> np.ndarray:
    if not parts:
        return np.empty(0, dtype=np.intp)
    return rng.permutation(np.concatenate(parts))


def augment(testing: Dataset, augmentation: Dataset | None) -> Dataset:
    """Return testing extended with every augmentation record.

    The result is a new dataset; testing itself is left untouched. An empty
    or missing augmentation set returns testing unchanged.
    """
    if augmentation is None or len(augmentation) == 0:
        return testing
    return testing.concat(augmentation)
