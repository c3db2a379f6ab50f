"""Build a distance store from observations and a custom distance function."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from .condensed import CondensedDistances
from .errors import ShapeError

logger = logging.getLogger(__name__)


def dist_make(
    x: Union[np.ndarray, pd.DataFrame],
    distance_fn: Callable[..., float],
    *args: Any,
    method: Optional[str] = None,
    n_jobs: Optional[int] = None,
    **kwargs: Any,
) -> CondensedDistances:
    """Make a distance store using a custom distance function.

    Args:
        x: Observations, one per row. A DataFrame with a non-default index
            contributes its index as item labels.
        distance_fn: Called as ``distance_fn(row_a, row_b, *args, **kwargs)``
            for every pair of rows i < j. Its output is not validated, and any
            exception it raises propagates unchanged.
        method: Name of the distance method, stored on the result.
        n_jobs: Evaluate pairs in parallel with joblib (None or 1 runs serially).
            Result order is the same either way.

    Example:
        >>> manhattan = lambda a, b: float(np.abs(a - b).sum())
        >>> dist_make(frame, manhattan, method="Manhattan (custom)")
    """
    labels = None
    if isinstance(x, pd.DataFrame):
        if not isinstance(x.index, pd.RangeIndex):
            labels = [str(v) for v in x.index]
        rows = x.to_numpy()
    else:
        rows = np.asarray(x)
    if rows.ndim != 2:
        raise ShapeError(f"x must be 2D with one observation per row, got shape {rows.shape}.")

    size = rows.shape[0]
    i, j = np.triu_indices(size, k=1)
    pairs = list(zip(i.tolist(), j.tolist()))
    if n_jobs is None or n_jobs == 1:
        values = [distance_fn(rows[a], rows[b], *args, **kwargs) for a, b in pairs]
    else:
        logger.debug("dist_make: %d pairs over n_jobs=%s", len(pairs), n_jobs)
        values = Parallel(n_jobs=n_jobs)(
            delayed(distance_fn)(rows[a], rows[b], *args, **kwargs) for a, b in pairs
        )
    return CondensedDistances(size, np.asarray(values, dtype=float).reshape(-1), labels, method)


__all__ = ["dist_make"]
