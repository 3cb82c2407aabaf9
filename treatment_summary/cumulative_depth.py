"""
Cumulative depth aggregation.

For each depth D the base rows from the surface down to D are pooled per
configuration (depth excluded) and their means and SEs are averaged with
equal weight per row. Shallow depths usually carry more comparisons, but
each depth counts once. An undefined mean or SE at any pooled depth
leaves the pooled figure undefined. Only rows at D itself are emitted,
carrying the pooled figures, so the output has one row per base row.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import pandas as pd

from .config import CUMULATIVE_KEY, DEPTH_COL, INFINITE_SE, MEAN_COLS, SEM_COLS
from .depth_order import DepthOrder

logger = logging.getLogger(__name__)

STAT_COLS = MEAN_COLS + SEM_COLS


def cumulative_for_depth(base: pd.DataFrame, order: DepthOrder, depth,
                         key=None) -> pd.DataFrame:
    """Rows of ``base`` at ``depth`` with surface-to-``depth`` mean statistics."""
    key = CUMULATIVE_KEY if key is None else list(key)
    pooled = base.loc[base[DEPTH_COL].isin(order.prefix(depth))]

    pooled_stats = (
        pooled.groupby(key, sort=False, dropna=False)[STAT_COLS]
        .agg(lambda s: s.mean(skipna=False))
        .reset_index()
    )
    at_depth = pooled.loc[pooled[DEPTH_COL] == depth].drop(columns=STAT_COLS)
    result = at_depth.merge(pooled_stats, on=key, how="left", validate="many_to_one")
    return result[list(base.columns)]


def cumulative_summary(base: pd.DataFrame, order: DepthOrder, key=None,
                       max_workers: int = 1) -> pd.DataFrame:
    """Concatenate :func:`cumulative_for_depth` over ``order``.

    Depths are independent, so with ``max_workers > 1`` they are computed
    on a thread pool; results are still concatenated in depth order.
    """
    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            parts = list(executor.map(
                lambda depth: cumulative_for_depth(base, order, depth, key), order))
    else:
        parts = [cumulative_for_depth(base, order, depth, key) for depth in order]

    if not parts:
        return base.iloc[0:0].copy()
    summary = pd.concat(parts, ignore_index=True)
    logger.info(f"Cumulative summary: {len(summary)} rows over {len(order)} depths")
    return summary


def sanitize_variance(summary: pd.DataFrame, sentinel: float = INFINITE_SE) -> pd.DataFrame:
    """Replace undefined SEs with ``sentinel`` (maximal uncertainty)."""
    out = summary.copy()
    n_undefined = int(out[SEM_COLS].isna().sum().sum())
    if n_undefined:
        logger.info(f"{n_undefined} undefined standard errors set to {sentinel}")
    out[SEM_COLS] = out[SEM_COLS].astype(float).fillna(sentinel)
    return out


def run(base: pd.DataFrame, order: DepthOrder, max_workers: int = 1) -> dict:
    """Cumulative summary with sanitised standard errors."""
    cumulative = cumulative_summary(base, order, max_workers=max_workers)
    return {
        "cumulative_raw": cumulative,
        "summary_data": sanitize_variance(cumulative),
    }
