"""Join state population with case counts and derive cases per 100k.

The join is an inner join on the normalized ``state_name``: a state that
appears in only one input is left out of the result.  The number of rows
left out on each side is logged and available from ``join_diagnostics``.
"""

from __future__ import annotations

from typing import Dict

import logging
import pandas as pd

from .cleaning import count_unmatched, normalize_state_name, round_half_up

logger = logging.getLogger(__name__)

PER_CAPITA_BASE: int = 100_000

OUTPUT_COLUMNS = [
    "geoid",
    "state_abbrev",
    "state_name",
    "case_count",
    "population_2018",
    "cases_per_100k",
]


def _with_normalized_key(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out["state_name"] = normalize_state_name(out["state_name"])
    return out.dropna(subset=["state_name"])


def join_diagnostics(population: pd.DataFrame, cases: pd.DataFrame) -> Dict[str, int]:
    """Count rows each side would lose in the join."""
    unmatched_pop, unmatched_cases = count_unmatched(
        _with_normalized_key(population), _with_normalized_key(cases), "state_name"
    )
    return {
        "population_unmatched": unmatched_pop,
        "cases_unmatched": unmatched_cases,
    }


def cases_per_100k(
    case_count: pd.Series, population: pd.Series, *, digits: int = 0
) -> pd.Series:
    """Cases per 100,000 residents, rounded half up.

    A missing or non-positive population yields a missing rate rather than
    an infinite one; zero cases yield a rate of 0.
    """
    population = population.where(population > 0)
    rate = round_half_up(case_count / population * PER_CAPITA_BASE, digits=digits)
    if digits == 0:
        return rate.astype("Int64")
    return rate


def join_population_cases(
    population: pd.DataFrame,
    cases: pd.DataFrame,
    *,
    digits: int = 0,
) -> pd.DataFrame:
    """Inner-join population and case counts on ``state_name``.

    Parameters
    ----------
    population : pd.DataFrame
        Output of ``population.resolve_state_population``.
    cases : pd.DataFrame
        Output of ``case_counts.load_case_counts``.
    digits : int
        Decimal places kept in ``cases_per_100k`` (0 gives whole numbers).

    Returns
    -------
    pd.DataFrame
        One row per state present in both inputs, columns ``OUTPUT_COLUMNS``.
    """
    diagnostics = join_diagnostics(population, cases)
    if any(diagnostics.values()):
        logger.warning(
            "Join dropped %d population row(s) and %d case count row(s) without a match",
            diagnostics["population_unmatched"],
            diagnostics["cases_unmatched"],
        )

    joined = _with_normalized_key(cases).merge(
        _with_normalized_key(population), on="state_name", how="inner"
    )
    joined = joined.rename(
        columns={
            "terminal_case_count": "case_count",
            "population_estimate_2018": "population_2018",
        }
    )
    joined["cases_per_100k"] = cases_per_100k(
        joined["case_count"], joined["population_2018"], digits=digits
    )
    logger.info("Joined population and case counts for %d states", len(joined))
    return joined[OUTPUT_COLUMNS].reset_index(drop=True)
