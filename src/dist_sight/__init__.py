"""
dist_sight: condensed distance matrices, group comparisons and centroid distances.
"""

from .condensed import CondensedDistances, linear_index
from .indexing import ByLabel, ByMask, ByPosition, dist_get, dist_subset, resolve
from .groups import dist_groups
from .centroids import dist_between_centroids, dist_multi_centroids, dist_to_centroids
from .builder import dist_make
from .long_format import LongFormatSchema, dist_long, pivot_to_numeric_matrix
from .errors import EuclideanEmbeddingWarning, IndexRangeError, LabelLookupError, ShapeError

__version__ = "0.1.0"

__all__ = [
    "CondensedDistances",
    "linear_index",
    "ByLabel",
    "ByMask",
    "ByPosition",
    "resolve",
    "dist_get",
    "dist_subset",
    "dist_groups",
    "dist_between_centroids",
    "dist_to_centroids",
    "dist_multi_centroids",
    "dist_make",
    "LongFormatSchema",
    "pivot_to_numeric_matrix",
    "dist_long",
    "ShapeError",
    "LabelLookupError",
    "IndexRangeError",
    "EuclideanEmbeddingWarning",
    "__version__",
]
