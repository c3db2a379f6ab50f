"""Exception and warning types raised by dist_sight."""

from __future__ import annotations


class ShapeError(ValueError):
    """A structural size mismatch (values vs. size, mask length, grouping length)."""


class LabelLookupError(LookupError):
    """An item label that is not present in the distance store."""


class IndexRangeError(IndexError):
    """A 1-based item position outside ``[1, N]``."""


class EuclideanEmbeddingWarning(RuntimeWarning):
    """Centroid algebra produced a negative squared distance.

    Issued when the distances cannot be represented in a Euclidean coordinate
    system. The affected results are returned as NaN.
    """


__all__ = [
    "ShapeError",
    "LabelLookupError",
    "IndexRangeError",
    "EuclideanEmbeddingWarning",
]
