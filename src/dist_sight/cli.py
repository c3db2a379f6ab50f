import argparse
import sys

import pandas as pd
from scipy.spatial import distance as sp_distance

from .centroids import dist_multi_centroids, dist_to_centroids
from .condensed import CondensedDistances
from .groups import dist_groups
from .indexing import dist_subset
from .long_format import LongFormatSchema, dist_long

# Row-pair metrics offered by the `long` command; the library itself takes any callable.
METRICS = (
    "braycurtis",
    "canberra",
    "chebyshev",
    "cityblock",
    "correlation",
    "cosine",
    "euclidean",
    "sqeuclidean",
)


def _read_dist(path):
    frame = pd.read_csv(path, index_col=0)
    frame.index = frame.index.astype(str)
    return CondensedDistances.from_square(frame)


def _read_groups(path, d):
    """Grouping CSV: columns item,group (matched to the distance labels) or a single column in item order."""
    frame = pd.read_csv(path)
    if {"item", "group"} <= set(frame.columns):
        lookup = dict(zip(frame["item"].astype(str), frame["group"]))
        items = [str(x) for x in d.items()]
        missing = [x for x in items if x not in lookup]
        if missing:
            raise ValueError(f"{path}: no group given for items {missing}")
        return [lookup[x] for x in items]
    if frame.shape[1] != 1:
        raise ValueError(f"{path}: expected columns item,group or a single group column")
    return frame.iloc[:, 0].tolist()


def _parse_items(text, d):
    tokens = [t.strip() for t in text.split(",") if t.strip()]
    if d.labels is None:
        return [int(t) for t in tokens]
    return tokens


def _add_dist_args(p, with_groups=True):
    p.add_argument("dist", type=str, help="Square distance matrix CSV (first column = item labels)")
    if with_groups:
        p.add_argument("groups", type=str, help="Grouping CSV (columns item,group, or one group column in item order)")
    p.add_argument("--out", type=str, required=True, help="Output CSV")
    return p


def _add_groups_parser(sub):
    p = sub.add_parser("groups", help="Label every item pair as within- or between-group")
    return _add_dist_args(p)


def _add_centroids_parser(sub):
    p = sub.add_parser("centroids", help="Distance from each item to each group centroid")
    _add_dist_args(p)
    p.add_argument("--squared", action="store_true", help="Report signed squared distances")
    return p


def _add_multi_parser(sub):
    p = sub.add_parser("multi-centroids", help="Distance matrix between group centroids")
    _add_dist_args(p)
    p.add_argument("--squared", action="store_true", help="Report signed squared distances")
    return p


def _add_subset_parser(sub):
    p = sub.add_parser("subset", help="Extract or reorder items of a distance matrix")
    _add_dist_args(p, with_groups=False)
    p.add_argument("--items", type=str, required=True, help="Comma-separated labels (or 1-based positions if unlabeled)")
    return p


def _add_long_parser(sub):
    p = sub.add_parser("long", help="Distance matrix from a long-format table")
    p.add_argument("data", type=str, help="Long-format CSV")
    p.add_argument("--out", type=str, required=True, help="Output square distance CSV")
    p.add_argument("--obs-col", type=str, default="SampleID")
    p.add_argument("--feature-col", type=str, default="FeatureID")
    p.add_argument("--value-col", type=str, default="Value")
    p.add_argument("--fill-value", type=float, default=0.0)
    p.add_argument("--metric", type=str, default="euclidean", choices=METRICS)
    p.add_argument("--n-jobs", dest="n_jobs", type=int, default=None)
    return p


def main(argv=None):
    argv = argv if argv is not None else sys.argv[1:]
    ap = argparse.ArgumentParser(prog="dist-sight", description="Group and centroid analysis of distance matrices")
    sub = ap.add_subparsers(dest="cmd", required=True)
    _add_groups_parser(sub)
    _add_centroids_parser(sub)
    _add_multi_parser(sub)
    _add_subset_parser(sub)
    _add_long_parser(sub)
    args = ap.parse_args(argv)

    try:
        if args.cmd == "groups":
            d = _read_dist(args.dist)
            out = dist_groups(d, _read_groups(args.groups, d))
            out.to_csv(args.out, index=False)
            print(f"wrote {args.out} with {len(out)} item pairs")
            return 0

        if args.cmd == "centroids":
            d = _read_dist(args.dist)
            out = dist_to_centroids(d, _read_groups(args.groups, d), squared=args.squared)
            out.to_csv(args.out, index=False)
            print(f"wrote {args.out} with {len(out)} item-centroid distances")
            return 0

        if args.cmd == "multi-centroids":
            d = _read_dist(args.dist)
            dc = dist_multi_centroids(d, _read_groups(args.groups, d), squared=args.squared)
            dc.to_frame().to_csv(args.out)
            print(f"wrote {args.out} with {dc.size} group centroids")
            return 0

        if args.cmd == "subset":
            d = _read_dist(args.dist)
            ds = dist_subset(d, _parse_items(args.items, d))
            ds.to_frame().to_csv(args.out)
            print(f"wrote {args.out} with {ds.size} items")
            return 0

        if args.cmd == "long":
            data = pd.read_csv(args.data)
            schema = LongFormatSchema(
                obs_col=args.obs_col,
                feature_col=args.feature_col,
                value_col=args.value_col,
                fill_value=args.fill_value,
            )
            d = dist_long(
                data,
                getattr(sp_distance, args.metric),
                schema=schema,
                method=args.metric,
                n_jobs=args.n_jobs,
            )
            d.to_frame().to_csv(args.out)
            print(f"wrote {args.out} with {d.size} observations ({args.metric})")
            return 0
    except (ValueError, LookupError) as exc:
        print(f"dist-sight {args.cmd}: {exc}", file=sys.stderr)
        return 2

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
