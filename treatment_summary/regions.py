"""Region lookup for the site table used by the map."""

import logging

import pandas as pd

from .config import REGION_RENAMES, STATE_REGIONS

logger = logging.getLogger(__name__)


def state_region_lookup() -> pd.DataFrame:
    """Two-letter state abbreviation → census region (North Central as Midwest)."""
    return pd.DataFrame({
        "State": list(STATE_REGIONS),
        "Region": [REGION_RENAMES.get(r, r) for r in STATE_REGIONS.values()],
    })


def add_regions(sites: pd.DataFrame, state_col: str = "State") -> pd.DataFrame:
    """Left-join the region of each site; unknown states get no region."""
    if state_col not in sites.columns:
        raise KeyError(f"Site table has no '{state_col}' column")
    lookup = state_region_lookup().rename(columns={"State": state_col})
    merged = sites.merge(lookup, on=state_col, how="left", validate="many_to_one")
    unmatched = merged["Region"].isna() & merged[state_col].notna()
    if unmatched.any():
        logger.warning(
            f"{int(unmatched.sum())} sites with unrecognised state: "
            f"{sorted(merged.loc[unmatched, state_col].astype(str).unique())}"
        )
    return merged
