"""
Invariant checks on a built summary dataset.

The cumulative summary must correspond one-to-one with the base summary:
every downstream filter assumes the same (configuration, depth) rows exist
in both. A dropped or duplicated row aborts the build.
"""

from collections import Counter

import pandas as pd

from .config import BASE_KEY, MIN_COMPARISONS, NA_LEVEL, SEM_COLS


class RowCountMismatchError(RuntimeError):
    """Cumulative summary does not have one row per base summary row."""


def _key_counts(df: pd.DataFrame, key) -> Counter:
    return Counter(tuple(str(v) for v in row) for row in df[key].itertuples(index=False))


def key_mismatches(base: pd.DataFrame, cumulative: pd.DataFrame, key=None) -> int:
    """Number of (configuration, depth) rows dropped or duplicated."""
    key = BASE_KEY if key is None else list(key)
    a, b = _key_counts(base, key), _key_counts(cumulative, key)
    return sum(((a - b) + (b - a)).values())


def check_row_count(base: pd.DataFrame, cumulative: pd.DataFrame) -> int:
    """Raise :class:`RowCountMismatchError` unless the summaries correspond one-to-one.

    Both the row counts and the (configuration, depth) rows must match; a
    dropped row offset by a duplicated one is still a mismatch.
    """
    if len(cumulative) != len(base):
        raise RowCountMismatchError(
            f"Cumulative summary has {len(cumulative)} rows, "
            f"base summary has {len(base)}"
        )
    mismatched = key_mismatches(base, cumulative)
    if mismatched:
        raise RowCountMismatchError(
            f"{mismatched} (configuration, depth) rows dropped or duplicated "
            f"in cumulative summary"
        )
    return len(base)


def verify_summary(base: pd.DataFrame, cumulative: pd.DataFrame,
                   min_comparisons: int = MIN_COMPARISONS,
                   na_level: str = NA_LEVEL) -> pd.DataFrame:
    """Table of invariant checks: one row per check with a PASSED flag."""
    self_comparison = (
        (base["Trt_1name"] == base["Trt_2name"])
        & ~((base["Trt_1name"] == na_level) & (base["Trt_2name"] == na_level))
    )
    checks = [
        ("Row count: cumulative == base", abs(len(cumulative) - len(base))),
        ("(configuration, depth) rows match", key_mismatches(base, cumulative)),
        (f"num_comparisons > {min_comparisons}",
         int((base["num_comparisons"] <= min_comparisons).sum())),
        ("Base standard errors non-zero", int((base[SEM_COLS] == 0).any(axis=1).sum())),
        ("No self-comparisons", int(self_comparison.sum())),
        ("Cumulative standard errors defined", int(cumulative[SEM_COLS].isna().any(axis=1).sum())),
    ]
    return pd.DataFrame([
        {"Check": name, "Violations": n, "PASSED": n == 0}
        for name, n in checks
    ])
