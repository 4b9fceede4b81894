"""Load the terminal pandemic case count per state.

The raw workbook carries two ``Region`` columns; after header cleaning the
second one (``region_2``) holds the state name and ``latest`` the most
recent cumulative count.
"""

from __future__ import annotations

import logging
import pandas as pd

from .cleaning import clean_names, coerce_numeric, normalize_state_name, resolve_columns
from .config import CASE_COUNT_COLUMNS

logger = logging.getLogger(__name__)


def load_case_counts(raw: pd.DataFrame) -> pd.DataFrame:
    """Return ``state_name`` / ``terminal_case_count`` rows from a raw extract."""
    logger.info("Loading case counts (%d rows)", len(raw))
    df = resolve_columns(clean_names(raw), CASE_COUNT_COLUMNS, stage="case_counts")
    df["state_name"] = normalize_state_name(df["state_name"])
    df["terminal_case_count"] = coerce_numeric(df["terminal_case_count"])

    dupes = int(df["state_name"].duplicated().sum())
    if dupes:
        logger.warning(
            "Case count extract has %d duplicate state name(s); keeping the last", dupes
        )
        df = df.drop_duplicates("state_name", keep="last").reset_index(drop=True)
    return df
