"""Citation display strings with DOI hyperlinks."""

import re

import pandas as pd

from .config import DOI_MARKER, DOI_URL_PREFIX

_DOI = re.compile(rf"(?<={re.escape(DOI_MARKER)}).*")


def citation_with_hyperlink(citation):
    """Wrap a citation in an HTML link to its DOI.

    "Foo et al. DOI: 10.1/xyz" becomes
    "<a target=_blank href=http://dx.doi.org/10.1/xyz>Foo et al. DOI: 10.1/xyz</a>".
    Citations without a DOI marker are returned unchanged.
    """
    if not isinstance(citation, str):
        return citation
    match = _DOI.search(citation)
    if match is None:
        return citation
    return f"<a target=_blank href={DOI_URL_PREFIX}{match.group(0)}>{citation}</a>"


def link_references(references: pd.DataFrame, citation_col: str = "citation") -> pd.DataFrame:
    """Copy of ``references`` with every citation rewritten as a hyperlink."""
    out = references.copy()
    out[citation_col] = out[citation_col].map(citation_with_hyperlink)
    return out
