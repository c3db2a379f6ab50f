"""
Distances for data in long (tidy) format.

A long table has one row per (observation, feature, value). It is pivoted to
a wide numeric matrix, one row per observation, before distances are built
with :func:`dist_sight.builder.dist_make`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

import pandas as pd

from .builder import dist_make
from .condensed import CondensedDistances
from .env import check_packages


@dataclass(frozen=True)
class LongFormatSchema:
    obs_col: str = "SampleID"
    feature_col: str = "FeatureID"
    value_col: str = "Value"
    # entered for (observation, feature) combinations absent from the table
    fill_value: float = 0.0


def _resolve_schema(
    schema: Optional[LongFormatSchema],
    obs_col: Optional[str],
    feature_col: Optional[str],
    value_col: Optional[str],
) -> LongFormatSchema:
    cfg = schema or LongFormatSchema()
    return LongFormatSchema(
        obs_col=obs_col or cfg.obs_col,
        feature_col=feature_col or cfg.feature_col,
        value_col=value_col or cfg.value_col,
        fill_value=cfg.fill_value,
    )


def pivot_to_numeric_matrix(
    data: pd.DataFrame,
    schema: Optional[LongFormatSchema] = None,
    *,
    obs_col: Optional[str] = None,
    feature_col: Optional[str] = None,
    value_col: Optional[str] = None,
) -> pd.DataFrame:
    """Convert a long table to a wide numeric matrix.

    Rows are observations and columns are features, both in order of first
    appearance. Missing combinations get ``schema.fill_value``.
    """
    check_packages("dist_sight.pivot_to_numeric_matrix", ["pandas"])
    cfg = _resolve_schema(schema, obs_col, feature_col, value_col)
    cols = [cfg.obs_col, cfg.feature_col, cfg.value_col]
    missing = [c for c in cols if c not in data.columns]
    if missing:
        raise ValueError(f"Long-format table is missing columns {missing}.")
    if data.duplicated(subset=[cfg.obs_col, cfg.feature_col]).any():
        raise ValueError(
            f"Long-format table has repeated ({cfg.obs_col}, {cfg.feature_col}) combinations."
        )

    df = data[cols].copy()
    df[cfg.value_col] = pd.to_numeric(df[cfg.value_col], errors="raise").astype(float)
    wide = df.pivot(index=cfg.obs_col, columns=cfg.feature_col, values=cfg.value_col)
    wide = wide.reindex(index=pd.unique(df[cfg.obs_col]), columns=pd.unique(df[cfg.feature_col]))
    wide = wide.fillna(cfg.fill_value).astype(float)
    wide.index.name = cfg.obs_col
    wide.columns.name = None
    return wide


def dist_long(
    data: pd.DataFrame,
    distance_fn: Callable[..., float],
    *args: Any,
    schema: Optional[LongFormatSchema] = None,
    **kwargs: Any,
) -> CondensedDistances:
    """Compute distances between observations of a long-format table.

    Extra positional and keyword arguments go to :func:`dist_make` (and from
    there to ``distance_fn``).
    """
    check_packages("dist_sight.dist_long", ["pandas"])
    wide = pivot_to_numeric_matrix(data, schema)
    return dist_make(wide, distance_fn, *args, **kwargs)


__all__ = ["LongFormatSchema", "pivot_to_numeric_matrix", "dist_long"]
