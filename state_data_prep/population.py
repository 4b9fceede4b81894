"""Resolve 2018 census population estimates per state.

Population rows come keyed by GEOID and a display name; the reference list
supplies postal abbreviations.  Both sides are normalized with
``normalize_state_name`` before an inner join on the name, so formatting
differences (case, stray whitespace) cannot cause a state to drop out.
"""

from __future__ import annotations

from typing import Optional

import logging
import pandas as pd

from . import census_fetch
from .cleaning import (
    clean_names,
    coerce_numeric,
    count_unmatched,
    drop_names,
    normalize_state_name,
    resolve_columns,
)
from .config import (
    CENSUS_SURVEY,
    CENSUS_YEAR,
    EXCLUDED_STATE_NAMES,
    POPULATION_COLUMNS,
    POPULATION_VARIABLE,
    STATE_REFERENCE_COLUMNS,
)

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = ["geoid", "state_abbrev", "state_name", "population_estimate_2018"]


def prepare_population(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean raw (geoid, name, estimate) rows and drop non-state territories."""
    df = resolve_columns(clean_names(raw), POPULATION_COLUMNS, stage="population")
    df["state_name"] = normalize_state_name(df["state_name"])
    df["geoid"] = df["geoid"].astype(str).str.strip().str.zfill(2)
    df["population_estimate_2018"] = coerce_numeric(df["population_estimate_2018"])

    keep = drop_names(df["state_name"], EXCLUDED_STATE_NAMES)
    if (~keep).any():
        logger.info("Dropping %d territory row(s) from population data", int((~keep).sum()))
    return df.loc[keep].reset_index(drop=True)


def prepare_reference(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean the (state_abbrev, state_name) reference list."""
    df = resolve_columns(clean_names(raw), STATE_REFERENCE_COLUMNS, stage="state_reference")
    df["state_abbrev"] = df["state_abbrev"].astype(str).str.strip()
    df["state_name"] = normalize_state_name(df["state_name"])
    return df.drop_duplicates().reset_index(drop=True)


def join_reference(population: pd.DataFrame, reference: pd.DataFrame) -> pd.DataFrame:
    """Attach abbreviations to population rows (inner join on state_name)."""
    unmatched_pop, _ = count_unmatched(population, reference, "state_name")
    if unmatched_pop:
        logger.warning(
            "%d population row(s) have no state reference entry and are dropped",
            unmatched_pop,
        )
    joined = reference.dropna(subset=["state_name"]).merge(
        population.dropna(subset=["state_name"]), on="state_name", how="inner"
    )
    return joined[OUTPUT_COLUMNS].reset_index(drop=True)


def resolve_state_population(
    population_raw: Optional[pd.DataFrame] = None,
    reference_raw: Optional[pd.DataFrame] = None,
    *,
    year: int = CENSUS_YEAR,
    variable: str = POPULATION_VARIABLE,
    survey: str = CENSUS_SURVEY,
) -> pd.DataFrame:
    """Return one row per state with geoid, abbreviation, name and population.

    Either input may be supplied directly (e.g. from a saved extract); the
    missing ones are fetched from the census service.  A retrieval failure
    propagates as ``RetrievalFailure``.
    """
    logger.info("Resolving state population estimates")
    if population_raw is None:
        population_raw = census_fetch.fetch_state_population(year, variable, survey)
    if reference_raw is None:
        reference_raw = census_fetch.fetch_state_reference()

    population = prepare_population(population_raw)
    reference = prepare_reference(reference_raw)
    result = join_reference(population, reference)
    logger.info("Resolved population for %d states", len(result))
    return result
