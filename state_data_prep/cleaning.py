"""Shared cleaning helpers used by every prep stage.

The helpers here are deliberately small and stateless: header cleaning,
declarative column selection, numeric coercion, state-name normalization
and half-up rounding.  Every stage goes through the same functions so that
join keys are normalized identically on both sides of a join.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

import numpy as np
import pandas as pd

from .config import NA_PLACEHOLDERS
from .exceptions import SchemaMismatch

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]+")

# Absorbs representation error so a computed 2.4999999999999996 still
# rounds as 2.5.
_HALF_UP_FUZZ: float = float(np.sqrt(np.finfo(float).eps))


def clean_name(name: object) -> str:
    """Return a single header in lower snake case (``"Tot Emp"`` -> ``"tot_emp"``)."""
    text = str(name).strip()
    text = _CAMEL_BOUNDARY.sub("_", text) if not text.isupper() else text
    text = _NON_ALNUM.sub("_", text).strip("_").lower()
    return text or "x"


def clean_names(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize all column names; duplicates get ``_2``, ``_3``... suffixes."""
    cleaned: List[str] = []
    taken = set()
    for col in df.columns:
        base = clean_name(col)
        name, n = base, 1
        while name in taken:
            n += 1
            name = f"{base}_{n}"
        taken.add(name)
        cleaned.append(name)
    out = df.copy()
    out.columns = cleaned
    return out


def resolve_columns(
    df: pd.DataFrame, mapping: Dict[str, Tuple[str, ...]], *, stage: str
) -> pd.DataFrame:
    """Select and rename columns according to a canonical mapping table.

    Parameters
    ----------
    df : pd.DataFrame
        A frame whose headers have already been through ``clean_names``.
    mapping : dict
        Canonical field name -> accepted source headers, in priority order.
    stage : str
        Stage name used in the error message.

    Returns
    -------
    pd.DataFrame
        Only the canonical fields, in mapping order.  Extra source columns
        are dropped.

    Raises
    ------
    SchemaMismatch
        If any canonical field has no matching source header.
    """
    available = set(df.columns)
    chosen: Dict[str, str] = {}
    for field, candidates in mapping.items():
        source = next((c for c in candidates if c in available), None)
        if source is not None:
            chosen[field] = source

    missing = set(mapping) - set(chosen)
    if missing:
        raise SchemaMismatch(stage, missing)

    out = pd.DataFrame(
        {field: df[source] for field, source in chosen.items()}, index=df.index
    )
    return out.reset_index(drop=True)


def coerce_numeric(series: pd.Series) -> pd.Series:
    """Convert a column to float; anything unparseable becomes NaN."""
    if pd.api.types.is_numeric_dtype(series):
        return series.astype(float)
    text = series.map(
        lambda v: v.strip().replace(",", "") if isinstance(v, str) else v
    )
    text = text.where(~text.isin(NA_PLACEHOLDERS))
    return pd.to_numeric(text, errors="coerce").astype(float)


def normalize_state_name(series: pd.Series) -> pd.Series:
    """Lower-case and trim state names; the join-key convention for every stage."""
    return series.map(lambda v: v.strip().lower() if isinstance(v, str) else v)


def round_half_up(values: pd.Series, digits: int = 0) -> pd.Series:
    """Round halves away from zero (2.5 -> 3, -2.5 -> -3), unlike ``round``."""
    scale = 10.0 ** digits
    numbers = pd.to_numeric(values, errors="coerce").astype(float)
    rounded = np.sign(numbers) * np.floor(np.abs(numbers) * scale + 0.5 + _HALF_UP_FUZZ)
    return rounded / scale


def count_unmatched(
    left: pd.DataFrame, right: pd.DataFrame, key: str
) -> Tuple[int, int]:
    """Count rows on each side whose ``key`` has no partner on the other side."""
    left_keys = left[key]
    right_keys = right[key]
    left_unmatched = int((~left_keys.isin(right_keys.dropna())).sum())
    right_unmatched = int((~right_keys.isin(left_keys.dropna())).sum())
    return left_unmatched, right_unmatched


def drop_names(series: pd.Series, names: Iterable[str]) -> pd.Series:
    """Boolean mask that is False where the normalized name is in ``names``."""
    excluded = {n.strip().lower() for n in names}
    return ~normalize_state_name(series).isin(excluded)
