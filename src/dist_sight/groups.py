"""
Group-aware views of a distance store.

``dist_groups`` lists every unordered pair of items with its within- or
between-group label. Group order is the order of first occurrence in the
grouping, which keeps labels such as "Between A and B" deterministic no
matter which item of the pair comes first.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Hashable, List, Sequence

import numpy as np
import pandas as pd

from .condensed import CondensedDistances
from .errors import ShapeError
from .indexing import dist_get

logger = logging.getLogger(__name__)


def as_group_list(groups: Any, name: str = "groups") -> List[Hashable]:
    """Return the grouping as a plain list, rejecting missing values."""
    if isinstance(groups, (str, bytes)):
        raise TypeError(f"{name} must be a sequence with one group per item, got a string.")
    if isinstance(groups, (pd.Series, pd.Index, pd.Categorical, np.ndarray)):
        out = list(np.asarray(groups, dtype=object).tolist())
    else:
        try:
            out = list(groups)
        except TypeError:
            raise TypeError(f"{name} must be a sequence, got {type(groups).__name__}.") from None
    if any(pd.api.types.is_scalar(x) and pd.isna(x) for x in out):
        raise ValueError(f"{name} must not contain missing values.")
    return out


def group_levels(groups: Sequence[Hashable]) -> List[Hashable]:
    """Distinct groups in order of first occurrence."""
    return list(dict.fromkeys(groups))


def group_items(groups: Sequence[Hashable]) -> Dict[Hashable, np.ndarray]:
    """Map each group (first-occurrence order) to its 1-based item positions."""
    members: Dict[Hashable, List[int]] = {}
    for pos, g in enumerate(groups, start=1):
        members.setdefault(g, []).append(pos)
    return {g: np.asarray(p, dtype=np.int64) for g, p in members.items()}


def dist_groups(d: CondensedDistances, groups: Any) -> pd.DataFrame:
    """Create a table of distances between groups of items.

    Args:
        d: Distance store.
        groups: One group identifier per item. Groups are ordered by first
            occurrence; a ``pd.Categorical`` grouping is treated the same
            way, so its declared category order is not used.

    Returns:
        DataFrame with one row per unordered pair (i < j), in canonical order:
          Item1, Item2: item labels, or 1-based positions when unlabeled
          Group1, Group2: the pair's groups, earlier group (first occurrence) first
          Label: categorical "Within <g>" or "Between <g1> and <g2>"
          Distance: the stored distance
    """
    g = as_group_list(groups)
    if len(g) != d.size:
        raise ShapeError(
            f"grouping length must equal item count (got {len(g)} groups for {d.size} items)."
        )
    levels = group_levels(g)
    rank = {lev: k for k, lev in enumerate(levels)}
    logger.debug("dist_groups: %d items, %d groups", d.size, len(levels))

    i, j = np.triu_indices(d.size, k=1)
    codes = np.asarray([rank[x] for x in g], dtype=np.int64)
    lo = np.minimum(codes[i], codes[j])
    hi = np.maximum(codes[i], codes[j])

    labels = [
        f"Within {levels[a]}" if a == b else f"Between {levels[a]} and {levels[b]}"
        for a, b in zip(lo.tolist(), hi.tolist())
    ]
    items = d.items()
    return pd.DataFrame(
        {
            "Item1": [items[k] for k in i.tolist()],
            "Item2": [items[k] for k in j.tolist()],
            "Group1": pd.Series([levels[a] for a in lo.tolist()], dtype=object),
            "Group2": pd.Series([levels[b] for b in hi.tolist()], dtype=object),
            "Label": pd.Categorical(labels, categories=sorted(set(labels))),
            "Distance": dist_get(d, i + 1, j + 1),
        }
    )


__all__ = ["as_group_list", "group_levels", "group_items", "dist_groups"]
