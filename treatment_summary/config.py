"""Shared configuration for the treatment summary pipeline."""

from pathlib import Path

import numpy as np

# ── Paths ──────────────────────────────────────────────────────────
ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = ROOT / "data"
RAW_CSV = DATA_DIR / "ALL_raw.csv"
SITE_CSV = DATA_DIR / "mapping" / "site-data_with_counties.csv"
REFERENCES_CSV = DATA_DIR / "references-for-app.csv"
OUTPUT_DIR = Path(__file__).resolve().parent / "output"

# ── Sentinels ──────────────────────────────────────────────────────
# Explicit category for blank categorical cells
NA_LEVEL = "NA"
# Depth label used when a comparison has no sample depth
SURFACE_DEPTH = "Soil Surface"
# SEs that cannot be computed (single value) are treated as infinitely uncertain
INFINITE_SE = np.inf

# ── Filters ────────────────────────────────────────────────────────
# Groups need strictly more comparisons than this to be kept
MIN_COMPARISONS = 4
# SE == 0 means all values identical: non-informative, not infinitely precise
DROP_ZERO_SE = True

# ── Columns ────────────────────────────────────────────────────────
PAPER_COL = "Paper_id"
DEPTH_COL = "sample_depth"

# Outcome measure -> (mean column, SE column)
METRICS = {
    "per_change": ("mean_per_change", "sem_per_change"),
    "actual_diff": ("mean_actual_diff", "sem_actual_diff"),
}
MEAN_COLS = [mean for mean, _ in METRICS.values()]
SEM_COLS = [sem for _, sem in METRICS.values()]

# Grouping used when summarising raw comparisons (includes depth)
BASE_KEY = [
    "Review", "group_level1", "group_level2", "group_level3",
    "sample_depth", "sample_year",
    "Trt_compare", "Trt_1name", "Trt_2name",
    "trt_specifics", "nutrient_groups",
    "cc_group1", "cc_group2", "pm_group1", "pm_group2",
    "Tillage_1", "Tillage_2",
]

# Grouping used for the cumulative depth means. Depth is dropped so that
# shallower rows can be pooled; the cover-crop, practice-management and
# tillage subgroups are dropped as well, which broadens each pool.
CUMULATIVE_KEY = [
    "Review", "group_level1", "group_level2", "group_level3",
    "sample_year",
    "Trt_compare", "Trt_1name", "Trt_2name",
    "trt_specifics", "nutrient_groups",
]

# Depth has its own sentinel (SURFACE_DEPTH), so it is not "NA"-filled
CATEGORICAL_COLUMNS = [c for c in BASE_KEY if c != DEPTH_COL]

FACET_COL = "group_facet_level32"

# Column order of the published summary dataset
SUMMARY_COLUMNS = BASE_KEY + [
    "mean_per_change", "sem_per_change",
    "mean_actual_diff", "sem_actual_diff",
    "num_papers", "num_comparisons", "paper_id_list",
    FACET_COL,
]

# ── Raw table schema ───────────────────────────────────────────────
TEXT_COLUMNS = [
    "Trt1", "Trt2", "Trt1_int2", "Trt2_int2",
    "Trt1_details", "Trt2_details", "trt_specifics",
    "Tillage_1", "Tillage_2", "nutrient_groups",
    "cc_group1", "cc_group2", "pm_group1", "pm_group2",
]
RAW_DTYPES = {
    **{c: "string" for c in TEXT_COLUMNS},
    **{c: "string" for c in BASE_KEY},
    "Trt2_int": "Int64",
    PAPER_COL: "Int64",
    "per_change": "float64",
    "actual_diff": "float64",
}

# ── References ─────────────────────────────────────────────────────
DOI_MARKER = "DOI: "
DOI_URL_PREFIX = "http://dx.doi.org/"

# ── Regions (US census regions, North Central reported as Midwest) ──
STATE_REGIONS = {
    "AL": "South", "AK": "West", "AZ": "West", "AR": "South",
    "CA": "West", "CO": "West", "CT": "Northeast", "DE": "South",
    "FL": "South", "GA": "South", "HI": "West", "ID": "West",
    "IL": "North Central", "IN": "North Central", "IA": "North Central",
    "KS": "North Central", "KY": "South", "LA": "South",
    "ME": "Northeast", "MD": "South", "MA": "Northeast",
    "MI": "North Central", "MN": "North Central", "MS": "South",
    "MO": "North Central", "MT": "West", "NE": "North Central",
    "NV": "West", "NH": "Northeast", "NJ": "Northeast",
    "NM": "West", "NY": "Northeast", "NC": "South",
    "ND": "North Central", "OH": "North Central", "OK": "South",
    "OR": "West", "PA": "Northeast", "RI": "Northeast",
    "SC": "South", "SD": "North Central", "TN": "South",
    "TX": "South", "UT": "West", "VT": "Northeast",
    "VA": "South", "WA": "West", "WV": "South",
    "WI": "North Central", "WY": "West",
}
REGION_RENAMES = {"North Central": "Midwest"}
