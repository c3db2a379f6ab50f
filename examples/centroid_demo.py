"""Centroid distances for two groups of planar points, without using the coordinates."""

import numpy as np
import pandas as pd

from dist_sight import dist_between_centroids, dist_groups, dist_make, dist_to_centroids


def euclidean(a, b):
    return float(np.sqrt(np.sum((a - b) ** 2)))


if __name__ == "__main__":
    pts = pd.DataFrame(
        [[-1, 0], [0, 1], [0, -1], [1, 0], [2, 0], [3, 1], [3, -1], [4, 0]],
        index=list("ABCDEFGH"),
        dtype=float,
    )
    groups = ["Control"] * 4 + ["Treatment"] * 4

    d = dist_make(pts, euclidean, method="euclidean")
    print(dist_groups(d, groups).groupby("Label", observed=True)["Distance"].mean())
    print(f"Centroid distance: {dist_between_centroids(d, list('ABCD'), list('EFGH')):.3f}")
    print(dist_to_centroids(d, groups))
