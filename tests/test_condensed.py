import numpy as np
import pandas as pd
import pytest
from scipy.spatial.distance import pdist

from dist_sight import CondensedDistances, IndexRangeError, LabelLookupError, ShapeError, linear_index
from dist_sight.condensed import n_pairs, size_from_pairs


DM = np.array(
    [
        [0.0, 1.0, 2.0, 3.0],
        [1.0, 0.0, 4.0, 5.0],
        [2.0, 4.0, 0.0, 6.0],
        [3.0, 5.0, 6.0, 0.0],
    ]
)


def test_linear_index_follows_canonical_pair_order():
    n = 4
    pairs = [(i, j) for i in range(1, n + 1) for j in range(i + 1, n + 1)]
    assert [linear_index(n, i, j) for i, j in pairs] == list(range(1, n_pairs(n) + 1))
    assert linear_index(4, 2, 3) == 4
    assert linear_index(4, 3, 4) == 6


@pytest.mark.parametrize("i, j", [(0, 2), (2, 2), (3, 2), (1, 5)])
def test_linear_index_rejects_invalid_pairs(i, j):
    with pytest.raises(IndexRangeError):
        linear_index(4, i, j)


def test_from_square_reads_upper_triangle_and_labels():
    frame = pd.DataFrame(DM, index=list("abcd"), columns=list("abcd"))
    d = CondensedDistances.from_square(frame)
    assert d.size == 4
    assert d.labels == ("a", "b", "c", "d")
    assert np.array_equal(d.values, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    assert np.array_equal(d.to_square(), DM)


def test_from_square_without_labels_and_round_trip():
    d = CondensedDistances.from_square(DM)
    assert d.labels is None
    assert d.items() == [1, 2, 3, 4]
    frame = d.to_frame()
    assert list(frame.index) == [1, 2, 3, 4]
    assert CondensedDistances.from_square(d.to_square()) == d


def test_values_length_must_match_size():
    with pytest.raises(ShapeError):
        CondensedDistances(4, [1.0, 2.0, 3.0])
    with pytest.raises(ShapeError):
        CondensedDistances.from_square(np.zeros((3, 2)))


def test_store_is_immutable_and_does_not_alias_input():
    raw = np.array([1.0, 2.0, 3.0])
    d = CondensedDistances(3, raw)
    raw[0] = 100.0
    assert d.values[0] == 1.0
    with pytest.raises(ValueError):
        d.values[0] = 5.0


def test_from_condensed_infers_size_from_pdist():
    pts = np.array([[0.0, 0.0], [3.0, 4.0], [6.0, 8.0]])
    d = CondensedDistances.from_condensed(pdist(pts), labels=["p", "q", "r"])
    assert d.size == 3
    assert d.values[0] == pytest.approx(5.0)
    with pytest.raises(ShapeError):
        size_from_pairs(4)
    assert size_from_pairs(0) == 1


def test_with_labels_and_label_lookup():
    d = CondensedDistances.from_square(DM)
    renamed = d.with_labels(["E", "F", "G", "H"])
    assert renamed.labels == ("E", "F", "G", "H")
    assert np.array_equal(renamed.values, d.values)
    assert renamed.label_position("G") == 3
    with pytest.raises(LabelLookupError, match="Z out of range"):
        renamed.label_position("Z")
    with pytest.raises(ShapeError):
        d.with_labels(["E", "F"])


def test_squared_returns_new_store():
    d = CondensedDistances.from_square(DM, labels=list("abcd"))
    d2 = d.squared()
    assert np.array_equal(d2.values, d.values ** 2)
    assert d2.labels == d.labels
    assert np.array_equal(d.values, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])


def test_small_stores():
    empty = CondensedDistances(0, [])
    single = CondensedDistances(1, [], labels=["only"])
    assert empty.to_square().shape == (0, 0)
    assert single.to_square().shape == (1, 1)
    assert single.items() == ["only"]
