"""
Base summary: per-configuration statistics straight from raw comparisons.

Every distinct configuration (review, group levels, depth, year, treatment
pair and the nutrient / cover-crop / practice-management / tillage tags)
gets the mean and standard error of percent change and absolute
difference, plus paper and comparison counts. Groups that are too small,
have zero spread, or compare a treatment with itself are dropped.
"""

import logging

import numpy as np
import pandas as pd
from scipy import stats

from .config import (
    BASE_KEY, DEPTH_COL, DROP_ZERO_SE, FACET_COL, METRICS,
    MIN_COMPARISONS, NA_LEVEL, PAPER_COL, SEM_COLS, SUMMARY_COLUMNS,
    SURFACE_DEPTH,
)

logger = logging.getLogger(__name__)


def standard_error(values: pd.Series) -> float:
    """Standard error of the mean over defined values (SD / sqrt(n)).

    Undefined for fewer than two defined values, returned as NaN.
    """
    v = values.dropna().astype(float)
    if len(v) < 2:
        return np.nan
    return float(stats.sem(v, ddof=1))


def paper_id_list(papers: pd.Series) -> str:
    """Sorted distinct paper ids joined with ';'."""
    return ";".join(str(p) for p in sorted(papers.dropna().unique()))


def fill_surface_depth(depths: pd.Series, surface: str = SURFACE_DEPTH) -> pd.Series:
    """Comparisons without a sample depth are surface measurements."""
    values = depths.astype(object)
    blank = values.isna() | values.map(lambda v: isinstance(v, str) and not v.strip()).astype(bool)
    return values.mask(blank, surface)


def summarise_base(df: pd.DataFrame) -> pd.DataFrame:
    """Group raw comparisons by the full configuration key and summarise.

    No filtering is applied here; see :func:`filter_base`.
    """
    required = BASE_KEY + [PAPER_COL] + list(METRICS)
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(f"Columns missing from comparison records: {missing}")

    data = df.copy()
    data[DEPTH_COL] = fill_surface_depth(data[DEPTH_COL])

    rows = []
    for key, group in data.groupby(BASE_KEY, sort=False, dropna=False):
        row = dict(zip(BASE_KEY, key))
        for value_col, (mean_col, sem_col) in METRICS.items():
            values = group[value_col].astype(float)
            row[mean_col] = values.mean()
            row[sem_col] = standard_error(values)
        row["num_papers"] = group[PAPER_COL].nunique(dropna=False)
        row["num_comparisons"] = len(group)
        row["paper_id_list"] = paper_id_list(group[PAPER_COL])
        rows.append(row)

    summary = pd.DataFrame(rows, columns=[c for c in SUMMARY_COLUMNS if c != FACET_COL])
    # one facet column is easier to sort on than two
    summary[FACET_COL] = (
        summary["group_level3"].astype(str) + "_" + summary["group_level2"].astype(str)
    )
    return summary


def filter_masks(summary: pd.DataFrame,
                 min_comparisons: int = MIN_COMPARISONS,
                 drop_zero_se: bool = DROP_ZERO_SE,
                 na_level: str = NA_LEVEL) -> dict:
    """Boolean masks of the rows each filter rejects."""
    too_few = summary["num_comparisons"] <= min_comparisons
    if drop_zero_se:
        zero_se = (summary[SEM_COLS] == 0).any(axis=1)
    else:
        zero_se = pd.Series(False, index=summary.index)
    same_name = summary["Trt_1name"] == summary["Trt_2name"]
    both_na = (summary["Trt_1name"] == na_level) & (summary["Trt_2name"] == na_level)
    return {
        "too_few_comparisons": too_few.astype(bool),
        "zero_standard_error": zero_se.astype(bool),
        "self_comparison": (same_name & ~both_na).astype(bool),
    }


def filter_base(summary: pd.DataFrame,
                min_comparisons: int = MIN_COMPARISONS,
                drop_zero_se: bool = DROP_ZERO_SE,
                na_level: str = NA_LEVEL) -> pd.DataFrame:
    """Drop small, zero-spread and self-comparison groups."""
    masks = filter_masks(summary, min_comparisons, drop_zero_se, na_level)
    rejected = pd.Series(False, index=summary.index)
    for name, mask in masks.items():
        if mask.any():
            logger.debug(f"{name}: {int(mask.sum())} groups rejected")
        rejected |= mask
    kept = summary.loc[~rejected].reset_index(drop=True)
    logger.info(f"Base summary: kept {len(kept)} of {len(summary)} groups")
    return kept


def filter_counts(summary: pd.DataFrame, **kwargs) -> pd.DataFrame:
    """Number of groups rejected by each filter (a group may fail several)."""
    masks = filter_masks(summary, **kwargs)
    return pd.DataFrame([
        {"Filter": name, "Rejected": int(mask.sum())}
        for name, mask in masks.items()
    ])


def build_base_summary(df: pd.DataFrame, **filter_kwargs) -> pd.DataFrame:
    """Summarise normalised comparisons and apply the base filters."""
    return filter_base(summarise_base(df), **filter_kwargs)


def run(df: pd.DataFrame, **filter_kwargs) -> dict:
    """Build the base summary and the per-filter rejection table."""
    unfiltered = summarise_base(df)
    base = filter_base(unfiltered, **filter_kwargs)
    return {
        "unfiltered": unfiltered,
        "base_summary": base,
        "filter_counts": filter_counts(unfiltered, **filter_kwargs),
    }
