"""
Depth ordering.

Depth labels ("0-5cm", "5-15cm", "100cm", ...) are ordered numerically
rather than character by character, and the surface label always comes
first. The resulting :class:`DepthOrder` is passed explicitly to the
cumulative aggregation for one build.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from .config import DEPTH_COL, SURFACE_DEPTH

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(label) -> tuple:
    """Sort key treating runs of digits as integers ("2-10cm" < "10-20cm").

    Labels without any digits compare lexically (case-insensitive).
    """
    text = str(label)
    parts = []
    for chunk in _DIGITS.split(text):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk.lower()))
    return tuple(parts), text


@dataclass(frozen=True)
class DepthOrder:
    """Total order over depth labels, shallowest first."""

    labels: tuple

    def __iter__(self):
        return iter(self.labels)

    def __len__(self):
        return len(self.labels)

    def __contains__(self, depth) -> bool:
        return depth in self.labels

    def rank(self, depth) -> int:
        try:
            return self.labels.index(depth)
        except ValueError:
            raise KeyError(f"Depth {depth!r} is not in the depth order") from None

    def prefix(self, depth) -> tuple:
        """All labels up to and including ``depth``."""
        return self.labels[: self.rank(depth) + 1]


def resolve_depth_order(labels: Iterable, surface: str = SURFACE_DEPTH) -> DepthOrder:
    """Numeric-aware ascending order with ``surface`` forced to the front."""
    unique = list(pd.unique(pd.Series(list(labels), dtype=object).dropna()))
    no_digits = [lab for lab in unique if not _DIGITS.search(str(lab)) and lab != surface]
    if no_digits:
        logger.debug(f"Depth labels without numeric part, ordered lexically: {no_digits}")

    ordered = sorted((lab for lab in unique if lab != surface), key=natural_sort_key)
    if surface in unique:
        ordered.insert(0, surface)
    return DepthOrder(tuple(ordered))


def run(base: pd.DataFrame, depth_col: str = DEPTH_COL) -> dict:
    """Resolve the depth order of a base summary."""
    order = resolve_depth_order(base[depth_col])
    return {
        "depth_order": order,
        "depth_table": pd.DataFrame({"rank": range(len(order)), depth_col: list(order)}),
    }
