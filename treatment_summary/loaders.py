"""
Typed CSV loading for the comparison, site and reference tables.

Column types are fixed here so that downstream grouping sees text where
text is expected (treatment codes such as "01" keep their leading zeros).
"""

import logging
from pathlib import Path

import pandas as pd

from .config import BASE_KEY, METRICS, PAPER_COL, RAW_CSV, RAW_DTYPES, REFERENCES_CSV, SITE_CSV

logger = logging.getLogger(__name__)


def _require(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return path


def load_raw_data(path: Path = RAW_CSV) -> pd.DataFrame:
    """Load raw treatment comparisons with explicit column types."""
    path = _require(path)
    header = pd.read_csv(path, nrows=0).columns
    dtypes = {col: dtype for col, dtype in RAW_DTYPES.items() if col in header}
    df = pd.read_csv(path, dtype=dtypes)

    required = BASE_KEY + [PAPER_COL] + list(METRICS)
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(f"{path.name} is missing columns: {missing}")
    logger.info(f"Loaded {len(df)} comparisons from {path}")
    return df


def load_sites(path: Path = SITE_CSV) -> pd.DataFrame:
    """Load the site location table."""
    return pd.read_csv(_require(path))


def load_references(path: Path = REFERENCES_CSV) -> pd.DataFrame:
    """Load the reference table; citations are Latin-1 encoded on disk."""
    return pd.read_csv(_require(path), dtype={PAPER_COL: "Int64"}, encoding="latin-1")
