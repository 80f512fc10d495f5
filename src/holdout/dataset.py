# Copyright (c) Syntropy Systems
"""In-memory labelled feature tables."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from types import TracebackType

    from numpy.typing import ArrayLike
    from typing_extensions import Self


@dataclass
class Dataset:
    """Ordered collection of labelled feature records.

    Every record has the same number of features and a unique integer id.
    Partition invariants (disjointness, coverage) are stated over ids.
    """

    features: np.ndarray
    labels: np.ndarray
    ids: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.int64))
    name: str = ""
    label_set: tuple[str, ...] = ()
    _closed: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        self.features = np.asarray(self.features, dtype=np.float64)
        if self.features.ndim != 2:  # noqa: PLR2004
            msg = f"features must be 2-dimensional, got shape {self.features.shape}"
            raise ValueError(msg)

        n = self.features.shape[0]
        self.labels = np.asarray(self.labels).astype(str)
        if self.labels.shape != (n,):
            msg = f"expected {n} labels, got shape {self.labels.shape}"
            raise ValueError(msg)

        # no ids means records are numbered by position
        self.ids = np.asarray(self.ids, dtype=np.int64)
        if self.ids.size == 0:
            self.ids = np.arange(n, dtype=np.int64)
        if self.ids.shape != (n,):
            msg = f"expected {n} ids, got shape {self.ids.shape}"
            raise ValueError(msg)
        if np.unique(self.ids).shape[0] != n:
            msg = "record ids must be unique"
            raise ValueError(msg)

        self.label_set = tuple(sorted(set(self.label_set) | set(self.labels.tolist())))

    @classmethod
    def from_records(
        cls,
        features: ArrayLike,
        labels: ArrayLike,
        name: str = "",
    ) -> Dataset:
        """Build a dataset from row-major features and matching labels."""
        return cls(features=np.asarray(features), labels=np.asarray(labels), name=name)

    def __len__(self) -> int:
        return int(self.features.shape[0])

    @property
    def n_features(self) -> int:
        """Dimensionality of every record."""
        return int(self.features.shape[1])

    @property
    def closed(self) -> bool:
        """Whether close() has released this dataset's arrays."""
        return self._closed

    def take(self, indices: ArrayLike) -> Dataset:
        """Return a new dataset holding the records at the given positions."""
        self._check_open()
        idx = np.asarray(indices, dtype=np.intp)
        return Dataset(
            features=self.features[idx],
            labels=self.labels[idx],
            ids=self.ids[idx],
            name=self.name,
            label_set=self.label_set,
        )

    def concat(self, other: Dataset) -> Dataset:
        """Return a new dataset with other's records appended after ours."""
        self._check_open()
        other._check_open()  # noqa: SLF001
        if other.n_features != self.n_features:
            msg = (
                f"cannot combine datasets with {self.n_features} and "
                f"{other.n_features} features"
            )
            raise ValueError(msg)
        return Dataset(
            features=np.vstack([self.features, other.features]),
            labels=np.concatenate([self.labels, other.labels]),
            ids=np.concatenate([self.ids, other.ids]),
            name=self.name,
            label_set=self.label_set + other.label_set,
        )

    def id_set(self) -> set[int]:
        """Return the ids of all records."""
        return set(self.ids.tolist())

    def close(self) -> None:
        """Release the record arrays. Safe to call more than once."""
        if self._closed:
            return
        n_features = self.n_features
        self.features = np.empty((0, n_features))
        self.labels = np.empty(0, dtype=str)
        self.ids = np.empty(0, dtype=np.int64)
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            msg = f"dataset {self.name or '<unnamed>'} is closed"
            raise ValueError(msg)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
