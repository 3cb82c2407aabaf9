"""Pytest configuration and shared fixtures."""
import numpy as np
import pandas as pd
import pytest

from treatment_summary.config import BASE_KEY, SUMMARY_COLUMNS

# One comparison configuration; tests override single fields
DEFAULT_FIELDS = {
    "Review": "Cover crop",
    "group_level1": "Soil",
    "group_level2": "Chemical",
    "group_level3": "SOC",
    "sample_depth": "0-15cm",
    "sample_year": "Year 1",
    "Trt_compare": "1_2",
    "Trt_1name": "Monoculture",
    "Trt_2name": "Rye",
    "trt_specifics": np.nan,
    "nutrient_groups": np.nan,
    "cc_group1": "Single species",
    "cc_group2": np.nan,
    "pm_group1": np.nan,
    "pm_group2": np.nan,
    "Tillage_1": np.nan,
    "Tillage_2": np.nan,
}


def _make_rows(per_change, actual_diff=None, papers=None, **fields):
    n = len(per_change)
    data = {**DEFAULT_FIELDS, **fields}
    df = pd.DataFrame({col: [data[col]] * n for col in BASE_KEY})
    df["Paper_id"] = list(papers) if papers is not None else list(range(1, n + 1))
    df["per_change"] = [float(v) for v in per_change]
    df["actual_diff"] = [float(v) for v in (actual_diff if actual_diff is not None else per_change)]
    return df


def _make_base_row(depth, mean, sem=0.5, **fields):
    row = {**DEFAULT_FIELDS, **fields}
    for col in BASE_KEY:
        if pd.isna(row[col]):
            row[col] = "NA"
    row.update({
        "sample_depth": depth,
        "mean_per_change": mean,
        "sem_per_change": sem,
        "mean_actual_diff": mean * 10,
        "sem_actual_diff": sem,
        "num_papers": 5,
        "num_comparisons": 5,
        "paper_id_list": "1;2;3;4;5",
        "group_facet_level32": f"{row['group_level3']}_{row['group_level2']}",
    })
    return row


@pytest.fixture
def make_rows():
    """Factory: raw comparison rows for one configuration."""
    return _make_rows


@pytest.fixture
def make_base():
    """Factory: base summary frame from (depth, mean[, sem], **fields) specs."""
    def factory(*specs):
        rows = []
        for spec in specs:
            if isinstance(spec, dict):
                rows.append(_make_base_row(**spec))
            else:
                rows.append(_make_base_row(*spec))
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    return factory


@pytest.fixture
def raw_records(make_rows):
    """Small raw comparison table covering surface, two depths and filters."""
    return pd.concat([
        make_rows([1, 2, 3, 4, 5], sample_depth=np.nan),
        make_rows([2, 4, 6, 8, 10], sample_depth="0-15cm"),
        make_rows([3, 6, 9, 12, 15], sample_depth="15-30cm"),
        # too few comparisons
        make_rows([1, 2, 3], sample_depth="0-15cm", Trt_2name="Clover"),
        # self-comparison
        make_rows([1, 2, 3, 4, 5], Trt_2name="Monoculture"),
        # identical values -> zero SE
        make_rows([7, 7, 7, 7, 7], Trt_2name="Vetch"),
    ], ignore_index=True)
