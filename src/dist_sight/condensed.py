"""
Condensed (triangular) storage for pairwise distances.

A store for N items keeps one value per unordered pair i < j, in canonical
order (1,2), (1,3), ..., (1,N), (2,3), ... which is also the layout used by
``scipy.spatial.distance.pdist``. The diagonal is implicitly zero and never
stored.

Positions are 1-based at the public surface.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy.spatial.distance import squareform

from .errors import IndexRangeError, LabelLookupError, ShapeError


def n_pairs(size: int) -> int:
    """Number of unordered pairs among ``size`` items, C(size, 2)."""
    size = int(size)
    return size * (size - 1) // 2


def size_from_pairs(n_values: int) -> int:
    """Invert :func:`n_pairs`; raise ShapeError when no integer size fits."""
    n_values = int(n_values)
    if n_values < 0:
        raise ShapeError(f"number of values must be >= 0, got {n_values}.")
    if n_values == 0:
        return 1
    size = int(round((1.0 + math.sqrt(1.0 + 8.0 * n_values)) / 2.0))
    if n_pairs(size) != n_values:
        raise ShapeError(f"{n_values} values do not form a condensed distance vector.")
    return size


def linear_index(n: int, i: Any, j: Any) -> Any:
    """1-based linear position of the pair (i, j), i < j, among ``n`` items.

    ``n*(i-1) - i*(i-1)/2 + (j-i)``. Accepts scalars (returns an int) or
    aligned integer arrays (returns an array).
    """
    n = int(n)
    i = np.asarray(i, dtype=np.int64)
    j = np.asarray(j, dtype=np.int64)
    if np.any((i < 1) | (i >= j) | (j > n)):
        raise IndexRangeError(f"index out of range: need 1 <= i < j <= {n}")
    out = n * (i - 1) - i * (i - 1) // 2 + (j - i)
    return int(out) if out.ndim == 0 else out


def _normalize_labels(labels: Optional[Iterable[object]], size: int) -> Optional[Tuple[str, ...]]:
    if labels is None:
        return None
    out = tuple(str(x) for x in labels)
    if len(out) != size:
        raise ShapeError(f"labels has {len(out)} entries, expected {size}.")
    return out


@dataclass(frozen=True, eq=False)
class CondensedDistances:
    """Immutable pairwise distances for ``size`` items in condensed form.

    Attributes:
        size: Number of items N.
        values: Read-only float array of length C(N, 2).
        labels: Optional tuple of N item labels. Repeats only arise from
            resampling subsets; lookup resolves to the first occurrence.
        method: Optional name of the distance method (metadata only).
    """

    size: int
    values: np.ndarray
    labels: Optional[Tuple[str, ...]] = None
    method: Optional[str] = None

    def __post_init__(self) -> None:
        size = int(self.size)
        if size < 0:
            raise ShapeError(f"size must be >= 0, got {size}.")
        if np.ndim(self.values) > 1:
            raise ShapeError(f"values must be 1D, got shape {np.shape(self.values)}.")
        values = np.array(self.values, dtype=float).reshape(-1)
        expected = n_pairs(size)
        if values.size != expected:
            raise ShapeError(
                f"values has length {values.size}, expected {expected} for size {size}."
            )
        values.setflags(write=False)
        object.__setattr__(self, "size", size)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "labels", _normalize_labels(self.labels, size))

    @classmethod
    def from_condensed(
        cls,
        values: Sequence[float],
        labels: Optional[Iterable[object]] = None,
        method: Optional[str] = None,
    ) -> "CondensedDistances":
        """Wrap a condensed vector (e.g. the output of ``pdist``), inferring N."""
        arr = np.asarray(values, dtype=float).reshape(-1)
        return cls(size_from_pairs(arr.size), arr, labels, method)

    @classmethod
    def from_square(
        cls,
        matrix: Union[np.ndarray, pd.DataFrame],
        labels: Optional[Iterable[object]] = None,
        method: Optional[str] = None,
    ) -> "CondensedDistances":
        """Build a store from a square layout, reading the upper triangle.

        Symmetry is assumed, not checked. A DataFrame contributes its index as
        labels unless ``labels`` is given or the index is a default RangeIndex.
        """
        if isinstance(matrix, pd.DataFrame) and labels is None:
            if not isinstance(matrix.index, pd.RangeIndex):
                labels = [str(x) for x in matrix.index]
        arr = np.asarray(matrix, dtype=float)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise ShapeError(f"distance matrix must be square, got shape {arr.shape}.")
        n = arr.shape[0]
        if n <= 1:
            values = np.empty(0, dtype=float)
        else:
            values = squareform(arr, force="tovector", checks=False)
        return cls(n, values, labels, method)

    def to_square(self) -> np.ndarray:
        """Full ``N x N`` symmetric array with a zero diagonal."""
        if self.size <= 1:
            return np.zeros((self.size, self.size), dtype=float)
        return squareform(self.values, force="tomatrix", checks=False)

    def to_frame(self) -> pd.DataFrame:
        """Square DataFrame indexed by :meth:`items`."""
        items = self.items()
        return pd.DataFrame(self.to_square(), index=items, columns=items)

    def items(self) -> list:
        """Item labels, or 1-based positions when the store is unlabeled."""
        if self.labels is not None:
            return list(self.labels)
        return list(range(1, self.size + 1))

    def label_position(self, label: str) -> int:
        """1-based position of ``label``."""
        if self.labels is None or label not in self.labels:
            raise LabelLookupError(f"{label} out of range")
        return self.labels.index(label) + 1

    def with_labels(self, labels: Iterable[object]) -> "CondensedDistances":
        return CondensedDistances(self.size, self.values, labels, self.method)

    def squared(self) -> "CondensedDistances":
        return CondensedDistances(self.size, self.values ** 2, self.labels, self.method)

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CondensedDistances):
            return NotImplemented
        return (
            self.size == other.size
            and self.labels == other.labels
            and np.array_equal(self.values, other.values, equal_nan=True)
        )

    __hash__ = None  # type: ignore[assignment]


__all__ = [
    "CondensedDistances",
    "linear_index",
    "n_pairs",
    "size_from_pairs",
]
