"""
Item selection over a condensed distance store.

Items can be addressed three ways, all normalized to 1-based positions before
any computation:

- ``ByLabel``: item labels, resolved against ``store.labels``
- ``ByPosition``: 1-based integer positions in ``[1, N]``
- ``ByMask``: a boolean mask of length N

Plain Python input (a label, a list of labels, integers, a boolean list or
numpy array) is converted with :func:`as_selector`.
"""
from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

import numpy as np
import pandas as pd

from .condensed import CondensedDistances, linear_index
from .errors import IndexRangeError, LabelLookupError, ShapeError


@dataclass(frozen=True)
class ByLabel:
    labels: Tuple[str, ...]


@dataclass(frozen=True)
class ByPosition:
    positions: Tuple[int, ...]


@dataclass(frozen=True)
class ByMask:
    mask: Tuple[bool, ...]

    def count(self) -> int:
        return int(sum(self.mask))


ItemSelector = Union[ByLabel, ByPosition, ByMask]


def _is_integral(x: Any) -> bool:
    if isinstance(x, (bool, np.bool_)):
        return False
    if isinstance(x, numbers.Integral):
        return True
    return isinstance(x, numbers.Real) and float(x).is_integer()


def as_selector(index: Any, name: str = "index") -> ItemSelector:
    """Normalize raw index input into an :data:`ItemSelector`.

    Raises:
        TypeError: if ``index`` is not labels, integer positions or a boolean mask.
    """
    if isinstance(index, (ByLabel, ByPosition, ByMask)):
        return index
    if isinstance(index, str):
        return ByLabel((index,))
    if isinstance(index, (bool, np.bool_)):
        raise TypeError(f"{name}: a single boolean is not a valid mask; pass one flag per item.")
    if isinstance(index, (numbers.Integral, numbers.Real)):
        index = [index]
    if isinstance(index, (pd.Series, pd.Index)):
        index = index.to_numpy()
    if isinstance(index, np.ndarray):
        if index.ndim != 1:
            raise TypeError(f"{name} must be 1D, got shape {index.shape}.")
        index = index.tolist()
    try:
        items = list(index)
    except TypeError:
        raise TypeError(
            f"{name} must be labels, 1-based positions or a boolean mask; got {type(index).__name__}."
        ) from None

    if not items:
        return ByPosition(())
    if all(isinstance(x, (bool, np.bool_)) for x in items):
        return ByMask(tuple(bool(x) for x in items))
    if all(isinstance(x, str) for x in items):
        return ByLabel(tuple(items))
    if all(_is_integral(x) for x in items):
        return ByPosition(tuple(int(x) for x in items))
    kinds = sorted({type(x).__name__ for x in items})
    raise TypeError(
        f"{name} must be all labels, all 1-based positions or a boolean mask; got {', '.join(kinds)}."
    )


def _label_positions(store: CondensedDistances) -> Dict[str, int]:
    lookup: Dict[str, int] = {}
    for pos, lab in enumerate(store.labels or (), start=1):
        lookup.setdefault(lab, pos)
    return lookup


def resolve(store: CondensedDistances, index: Any, name: str = "index") -> np.ndarray:
    """Resolve ``index`` to an int array of 1-based positions, in selector order."""
    sel = as_selector(index, name)
    n = store.size
    if isinstance(sel, ByMask):
        if len(sel.mask) != n:
            raise ShapeError(f"{name}: boolean mask has length {len(sel.mask)}, expected {n}.")
        return np.flatnonzero(np.asarray(sel.mask, dtype=bool)) + 1
    if isinstance(sel, ByLabel):
        lookup = _label_positions(store)
        out = []
        for lab in sel.labels:
            if lab not in lookup:
                raise LabelLookupError(f"{lab} out of range")
            out.append(lookup[lab])
        return np.asarray(out, dtype=np.int64)
    pos = np.asarray(sel.positions, dtype=np.int64)
    if pos.size and (pos.min() < 1 or pos.max() > n):
        raise IndexRangeError(f"{name} out of range")
    return pos


def _broadcast(idx1: np.ndarray, idx2: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    n1, n2 = idx1.size, idx2.size
    if n1 == n2:
        return idx1, idx2
    short, long_ = min(n1, n2), max(n1, n2)
    if short == 0 or long_ % short != 0:
        raise ShapeError(
            f"cannot broadcast index of length {n1} against index of length {n2}; "
            "the shorter length must divide the longer evenly."
        )
    reps = long_ // short
    if n1 < n2:
        return np.tile(idx1, reps), idx2
    return idx1, np.tile(idx2, reps)


def pair_values(store: CondensedDistances, pos1: np.ndarray, pos2: np.ndarray) -> np.ndarray:
    """Distances for aligned 1-based position arrays; self pairs give 0."""
    i = np.minimum(pos1, pos2)
    j = np.maximum(pos1, pos2)
    out = np.zeros(i.shape, dtype=float)
    off = i != j
    if np.any(off):
        slot = linear_index(store.size, i[off], j[off]) - 1
        out[off] = store.values[slot]
    return out


def dist_get(store: CondensedDistances, idx1: Any, idx2: Any) -> np.ndarray:
    """Distances between paired items of ``idx1`` and ``idx2``.

    The shorter index is repeated to the length of the longer; its length must
    divide the longer one evenly.

    Example:
        >>> dist_get(d, "a", ["a", "b", "c"])
        array([0., 1., 2.])
    """
    pos1 = resolve(store, idx1, "idx1")
    pos2 = resolve(store, idx2, "idx2")
    pos1, pos2 = _broadcast(pos1, pos2)
    return pair_values(store, pos1, pos2)


def dist_subset(store: CondensedDistances, index: Any) -> CondensedDistances:
    """Extract (and reorder) part of a distance store.

    The result follows the order of ``index``; repeated items are allowed.
    """
    pos = resolve(store, index)
    k = pos.size
    if k > 1:
        a, b = np.triu_indices(k, k=1)
        values = pair_values(store, pos[a], pos[b])
    else:
        values = np.empty(0, dtype=float)
    labels = [store.labels[p - 1] for p in pos] if store.labels is not None else None
    return CondensedDistances(k, values, labels, store.method)


__all__ = [
    "ByLabel",
    "ByPosition",
    "ByMask",
    "ItemSelector",
    "as_selector",
    "resolve",
    "pair_values",
    "dist_get",
    "dist_subset",
]
