"""Fail-fast checks for optional runtime packages."""
from __future__ import annotations

import importlib.util
from typing import Iterable


def check_packages(fcn_name: str, pkg_names: Iterable[str]) -> None:
    """Raise RuntimeError naming every package in ``pkg_names`` that is not installed."""
    missing = [p for p in pkg_names if importlib.util.find_spec(p) is None]
    if len(missing) == 1:
        raise RuntimeError(
            f'Package "{missing[0]}" is not installed, but is needed by the function '
            f'"{fcn_name}". Please install the missing package to use this function.'
        )
    if len(missing) > 1:
        names = '", "'.join(missing)
        raise RuntimeError(
            f'Packages "{names}" are not installed, but are needed by the function '
            f'"{fcn_name}". Please install the missing packages to use this function.'
        )


__all__ = ["check_packages"]
