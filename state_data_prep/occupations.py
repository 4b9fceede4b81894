"""Normalizers for the BLS Occupational Employment Statistics extracts.

The same cleaning runs at three geographic scopes:

* state  - one row per (state, occupation)
* metro  - one row per (metropolitan area, occupation)
* national - one row per occupation, tagged with ``data_scope``

Each normalizer cleans the headers, keeps only the measures used
downstream, coerces them to numbers (suppressed cells such as ``**`` become
NaN) and, where jobs-per-1000 exists, derives ``share_of_workforce``.
"""

from __future__ import annotations

from typing import Dict, Tuple

import logging
import pandas as pd

from .cleaning import clean_names, coerce_numeric, resolve_columns
from .config import (
    METRO_OCCUPATION_COLUMNS,
    NATIONAL_OCCUPATION_COLUMNS,
    NATIONAL_SCOPE,
    STATE_OCCUPATION_COLUMNS,
)

logger = logging.getLogger(__name__)

AREA_MEASURES: Tuple[str, ...] = (
    "total_employment",
    "jobs_per_1000",
    "mean_hourly_wage",
    "mean_annual_wage",
)
NATIONAL_MEASURES: Tuple[str, ...] = (
    "total_employment",
    "mean_hourly_wage",
    "mean_annual_wage",
)


def add_share_of_workforce(df: pd.DataFrame) -> pd.DataFrame:
    """Move jobs-per-1000 one decimal place to get jobs per 100 workers."""
    out = df.copy()
    out["share_of_workforce"] = out["jobs_per_1000"] / 10
    return out


def _normalize(
    raw: pd.DataFrame,
    columns: Dict[str, Tuple[str, ...]],
    measures: Tuple[str, ...],
    *,
    stage: str,
) -> pd.DataFrame:
    df = resolve_columns(clean_names(raw), columns, stage=stage)
    for col in measures:
        df[col] = coerce_numeric(df[col])

    missing = int(df["total_employment"].isna().sum())
    if missing:
        logger.info("%s: %d row(s) without a usable total_employment", stage, missing)
    return df


def normalize_state_occupations(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean the state-level OES extract."""
    logger.info("Normalizing state occupation records (%d rows)", len(raw))
    df = _normalize(
        raw, STATE_OCCUPATION_COLUMNS, AREA_MEASURES, stage="state_occupations"
    )
    return add_share_of_workforce(df)


def normalize_metro_occupations(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean the metropolitan-area OES extract."""
    logger.info("Normalizing metro occupation records (%d rows)", len(raw))
    df = _normalize(
        raw, METRO_OCCUPATION_COLUMNS, AREA_MEASURES, stage="metro_occupations"
    )
    return add_share_of_workforce(df)


def normalize_national_occupations(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean the national OES extract and tag every row with ``data_scope``.

    National records have no jobs-per-1000 measure, so no
    ``share_of_workforce`` is derived.
    """
    logger.info("Normalizing national occupation records (%d rows)", len(raw))
    df = _normalize(
        raw,
        NATIONAL_OCCUPATION_COLUMNS,
        NATIONAL_MEASURES,
        stage="national_occupations",
    )
    df.insert(0, "data_scope", NATIONAL_SCOPE)
    return df
