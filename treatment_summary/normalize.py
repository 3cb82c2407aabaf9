"""
Record normalisation.

Blank categorical cells become an explicit "NA" category so that rows with
missing metadata still form their own groups instead of dropping out of
every group-by.
"""

import pandas as pd

from .config import CATEGORICAL_COLUMNS, NA_LEVEL


def _is_blank(values: pd.Series) -> pd.Series:
    """True for undefined cells and empty / whitespace-only strings."""
    empty = values.map(lambda v: isinstance(v, str) and not v.strip())
    return values.isna() | empty.astype(bool)


def normalize_records(df: pd.DataFrame, columns=None, na_level: str = NA_LEVEL) -> pd.DataFrame:
    """Return a copy of ``df`` with blank categorical cells set to ``na_level``.

    Numeric columns are never touched. Applying this twice gives the same
    frame as applying it once.
    """
    columns = CATEGORICAL_COLUMNS if columns is None else list(columns)
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"Categorical columns missing from records: {missing}")

    out = df.copy()
    for col in columns:
        values = out[col].astype(object)
        out[col] = values.mask(_is_blank(values), na_level)
    return out
