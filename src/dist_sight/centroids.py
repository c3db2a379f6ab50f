"""
Centroid distances inferred from pairwise distances alone.

If the items of a distance store occupy some Euclidean space, the distance
between group centroids follows from sums of squared pairwise distances,
without constructing the space (Apostol and Mnatsakanian, "Sums of squares
of distances in m-space", Amer. Math. Monthly 110, 516, 2003; eq. 28
rearranged):

    |c1 - c2|^2 = S12 / (n1 n2) - S1 / n1^2 - S2 / n2^2

where S1 is the sum of squared distances within group 1 (unordered pairs)
and S12 the sum over all cross-group pairs. The distance from a single item
k to the centroid of group g is the special case n1 = 1, S1 = 0:

    |x_k - c_g|^2 = C_kg / n_g - W_g / n_g^2

The same approach underlies ANOVA-like tests on distances (e.g. adonis).

When the distances cannot be embedded in a Euclidean space the right-hand
side can be negative. With ``squared=False`` such entries become NaN and a
single :class:`~dist_sight.errors.EuclideanEmbeddingWarning` is issued per
call; with ``squared=True`` the signed value is returned and no NaN occurs.
"""
from __future__ import annotations

import logging
import warnings
from typing import Any, Dict, Hashable, List, Tuple, Union

import numpy as np
import pandas as pd

from .condensed import CondensedDistances
from .errors import EuclideanEmbeddingWarning, ShapeError
from .groups import as_group_list, group_items
from .indexing import ByLabel, ByMask, ByPosition, dist_subset, pair_values, resolve

logger = logging.getLogger(__name__)

_NEGATIVE_MSG = (
    "When computing {context}, negative values were produced before taking a "
    "square root. This happens because the distances cannot be represented in a "
    "Euclidean coordinate system. These distances are being returned as NaN. "
    "Alternately, you may set `squared=True` to return the squared distances. "
    "In this case, you will never get NaN, but you might receive negative numbers "
    "for the squared distance."
)


def finalize_squared(
    raw: Any,
    squared: bool = False,
    context: str = "distance between centroids",
    stacklevel: int = 2,
) -> np.ndarray:
    """Turn raw squared centroid distances into the returned values.

    Negative entries become NaN (with one warning for the whole array) unless
    ``squared`` is set, in which case ``raw`` is returned unchanged.
    ``stacklevel`` is passed to :func:`warnings.warn`; public callers raise it
    so the warning points at user code.
    """
    raw = np.array(raw, dtype=float)
    if squared:
        return raw
    negative = raw < 0
    out = np.full(raw.shape, np.nan, dtype=float)
    if np.any(negative):
        warnings.warn(_NEGATIVE_MSG.format(context=context), EuclideanEmbeddingWarning, stacklevel=stacklevel)
    out[~negative] = np.sqrt(raw[~negative])
    return out


def _group_positions(d: CondensedDistances, index: Any, name: str) -> np.ndarray:
    pos = resolve(d, index, name)
    if pos.size == 0:
        raise ShapeError(f"{name} selects no items; a centroid needs at least one.")
    return pos


def _within_sum(d2: CondensedDistances, pos: np.ndarray) -> float:
    """Sum of squared distances over unordered pairs of ``pos`` (d2 holds squares)."""
    return float(dist_subset(d2, pos).values.sum())


def _cross_sum(d2: CondensedDistances, pos1: np.ndarray, pos2: np.ndarray) -> float:
    a = np.repeat(pos1, pos2.size)
    b = np.tile(pos2, pos1.size)
    return float(pair_values(d2, a, b).sum())


def _between_raw(d2: CondensedDistances, pos1: np.ndarray, pos2: np.ndarray) -> float:
    n1, n2 = pos1.size, pos2.size
    term1 = _within_sum(d2, pos1) / n1 ** 2
    term2 = _within_sum(d2, pos2) / n2 ** 2
    term12 = _cross_sum(d2, pos1, pos2) / (n1 * n2)
    return term12 - term1 - term2


_BATCH_ELEMENT = (ByLabel, ByPosition, ByMask, list, tuple, range, np.ndarray, pd.Series, pd.Index)


def _is_selector_batch(index: Any) -> bool:
    return (
        isinstance(index, (list, tuple))
        and len(index) > 0
        and all(isinstance(x, _BATCH_ELEMENT) for x in index)
    )


def dist_between_centroids(
    d: CondensedDistances,
    idx1: Any,
    idx2: Any,
    squared: bool = False,
) -> Union[float, np.ndarray]:
    """Distance between the centroids of two groups of items.

    Args:
        d: Distance store.
        idx1, idx2: Items of each group (labels, 1-based positions or a
            boolean mask). Repeated items are counted every time. For the
            batched form pass lists of such selectors; a single selector on
            one side is paired with every selector on the other.
        squared: Return the signed squared distance instead.

    Returns:
        A float for a single pair of groups, or an array for the batched form.
        Entries that cannot be represented in Euclidean space are NaN unless
        ``squared`` is set.
    """
    return _between_centroids(d, idx1, idx2, squared, stacklevel=4)


def _between_centroids(
    d: CondensedDistances,
    idx1: Any,
    idx2: Any,
    squared: bool,
    stacklevel: int,
) -> Union[float, np.ndarray]:
    batch1, batch2 = _is_selector_batch(idx1), _is_selector_batch(idx2)
    d2 = d.squared()
    if not (batch1 or batch2):
        raw = _between_raw(d2, _group_positions(d, idx1, "idx1"), _group_positions(d, idx2, "idx2"))
        return float(finalize_squared([raw], squared, "distance between centroids", stacklevel)[0])

    left = list(idx1) if batch1 else [idx1] * len(idx2)
    right = list(idx2) if batch2 else [idx2] * len(idx1)
    if len(left) != len(right):
        raise ShapeError(
            f"idx1 and idx2 hold {len(left)} and {len(right)} groups; batched inputs must match."
        )
    raw = np.array(
        [
            _between_raw(d2, _group_positions(d, a, "idx1"), _group_positions(d, b, "idx2"))
            for a, b in zip(left, right)
        ],
        dtype=float,
    )
    return finalize_squared(raw, squared, "distance between centroids", stacklevel)


def _check_grouping(d: CondensedDistances, groups: Any) -> List[Hashable]:
    g = as_group_list(groups)
    if len(g) != d.size:
        raise ShapeError(
            f"grouping length must equal item count (got {len(g)} groups for {d.size} items)."
        )
    return g


def dist_to_centroids(d: CondensedDistances, groups: Any, squared: bool = False) -> pd.DataFrame:
    """Distance from every item to the centroid of every group.

    Returns:
        DataFrame with N x G rows, one block per group (first-occurrence order)
        with items varying fastest:
          Item: item label, or 1-based position when unlabeled
          CentroidGroup: the group whose centroid is measured
          CentroidDistance: inferred distance (NaN if not Euclidean-representable)
    """
    g = _check_grouping(d, groups)
    members = group_items(g)
    d2 = d.squared()
    sq2 = d2.to_square()

    # (size, within-group squared sum) per group, reused for every item
    group_sums: Dict[Hashable, Tuple[int, float]] = {
        grp: (int(pos.size), _within_sum(d2, pos)) for grp, pos in members.items()
    }
    logger.debug("dist_to_centroids: %d items, %d groups", d.size, len(members))

    blocks = []
    for grp, pos in members.items():
        n_g, w_g = group_sums[grp]
        c_kg = sq2[:, pos - 1].sum(axis=1)
        blocks.append(c_kg / n_g - w_g / n_g ** 2)
    raw = np.concatenate(blocks) if blocks else np.empty(0, dtype=float)
    values = finalize_squared(raw, squared, "distance to centroids", stacklevel=3)

    items = d.items()
    return pd.DataFrame(
        {
            "Item": items * len(members),
            "CentroidGroup": pd.Series([grp for grp in members for _ in items], dtype=object),
            "CentroidDistance": values,
        }
    )


def dist_multi_centroids(d: CondensedDistances, groups: Any, squared: bool = False) -> CondensedDistances:
    """Distance store of centroid-to-centroid distances between all groups.

    The result has one item per distinct group, labeled by the group and
    ordered by first occurrence. Groups whose string forms coincide (such as
    ``1`` and ``"1"``) cannot be told apart by label and raise ValueError.
    """
    g = _check_grouping(d, groups)
    members = group_items(g)
    names = list(members)
    labels = [str(x) for x in names]
    if len(set(labels)) != len(labels):
        clashes = sorted({lab for lab in labels if labels.count(lab) > 1})
        raise ValueError(f"distinct groups share the labels {clashes}; use unambiguous group names.")
    logger.debug("dist_multi_centroids: %d groups", len(names))
    if len(names) < 2:
        return CondensedDistances(len(names), np.empty(0, dtype=float), labels)

    a, b = np.triu_indices(len(names), k=1)
    left = [members[names[k]] for k in a.tolist()]
    right = [members[names[k]] for k in b.tolist()]
    values = _between_centroids(d, left, right, squared, stacklevel=4)
    return CondensedDistances(len(names), values, labels)


__all__ = [
    "finalize_squared",
    "dist_between_centroids",
    "dist_to_centroids",
    "dist_multi_centroids",
]
