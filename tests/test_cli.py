import math

import numpy as np
import pandas as pd
import pytest
from scipy.spatial.distance import pdist, squareform

from dist_sight.cli import main as cli_main


PTS = np.array(
    [[-1.0, 0.0], [0.0, 1.0], [0.0, -1.0], [1.0, 0.0], [2.0, 0.0], [3.0, 1.0], [3.0, -1.0], [4.0, 0.0]]
)
LABELS = list("ABCDEFGH")


def _write_inputs(tmp_path):
    dist_path = tmp_path / "dist.csv"
    groups_path = tmp_path / "groups.csv"
    pd.DataFrame(squareform(pdist(PTS)), index=LABELS, columns=LABELS).to_csv(dist_path)
    # item order in the grouping file does not need to match the matrix
    pd.DataFrame(
        {"item": LABELS[::-1], "group": ["Treatment"] * 4 + ["Control"] * 4}
    ).to_csv(groups_path, index=False)
    return dist_path, groups_path


def test_groups_cli_writes_pair_table(tmp_path):
    dist_path, groups_path = _write_inputs(tmp_path)
    out = tmp_path / "groups_out.csv"
    rc = cli_main(["groups", str(dist_path), str(groups_path), "--out", str(out)])
    assert rc == 0
    res = pd.read_csv(out)
    assert len(res) == 28
    assert set(res["Label"]) == {"Within Control", "Within Treatment", "Between Control and Treatment"}


def test_centroids_cli_writes_item_centroid_distances(tmp_path):
    dist_path, groups_path = _write_inputs(tmp_path)
    out = tmp_path / "centroids.csv"
    rc = cli_main(["centroids", str(dist_path), str(groups_path), "--out", str(out), "--squared"])
    assert rc == 0
    res = pd.read_csv(out)
    assert len(res) == 16
    own = res[(res["CentroidGroup"] == "Control") & (res["Item"].isin(list("ABCD")))]
    assert np.allclose(own["CentroidDistance"].to_numpy(), 1.0)
    far = res[(res["CentroidGroup"] == "Treatment") & (res["Item"] == "A")]
    assert float(far["CentroidDistance"].iloc[0]) == pytest.approx(16.0)


def test_multi_centroids_cli_writes_square_matrix(tmp_path):
    dist_path, groups_path = _write_inputs(tmp_path)
    out = tmp_path / "multi.csv"
    rc = cli_main(["multi-centroids", str(dist_path), str(groups_path), "--out", str(out)])
    assert rc == 0
    res = pd.read_csv(out, index_col=0)
    assert list(res.index) == ["Control", "Treatment"]
    assert float(res.loc["Control", "Treatment"]) == pytest.approx(3.0)


def test_subset_cli_reorders_items(tmp_path):
    dist_path, _ = _write_inputs(tmp_path)
    out = tmp_path / "subset.csv"
    rc = cli_main(["subset", str(dist_path), "--items", "H,A", "--out", str(out)])
    assert rc == 0
    res = pd.read_csv(out, index_col=0)
    assert list(res.index) == ["H", "A"]
    assert float(res.loc["H", "A"]) == pytest.approx(5.0)


def test_long_cli_builds_distance_matrix(tmp_path):
    data = pd.DataFrame(
        {
            "SampleID": ["A", "A", "B", "B", "C"],
            "FeatureID": ["x", "y", "x", "y", "y"],
            "Value": [0.0, 0.0, 3.0, 4.0, 1.0],
        }
    )
    data_path = tmp_path / "long.csv"
    data.to_csv(data_path, index=False)
    out = tmp_path / "long_dist.csv"
    rc = cli_main(["long", str(data_path), "--out", str(out), "--metric", "euclidean"])
    assert rc == 0
    res = pd.read_csv(out, index_col=0)
    assert float(res.loc["A", "B"]) == pytest.approx(5.0)
    assert float(res.loc["B", "C"]) == pytest.approx(math.sqrt(9.0 + 9.0))


def test_cli_reports_input_errors(tmp_path, capsys):
    dist_path, _ = _write_inputs(tmp_path)
    bad_groups = tmp_path / "bad_groups.csv"
    pd.DataFrame({"item": ["A", "B"], "group": ["x", "y"]}).to_csv(bad_groups, index=False)
    rc = cli_main(["groups", str(dist_path), str(bad_groups), "--out", str(tmp_path / "x.csv")])
    assert rc == 2
    assert "no group given" in capsys.readouterr().err

    rc = cli_main(["subset", str(dist_path), "--items", "A,Z", "--out", str(tmp_path / "y.csv")])
    assert rc == 2
    assert "Z out of range" in capsys.readouterr().err
