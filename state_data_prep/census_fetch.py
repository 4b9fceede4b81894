"""Helpers for fetching state population data from the US Census Bureau.

This module wraps the Census Data API (American Community Survey
estimates) and the Census state reference file.  Error handling and
logging are centralised here: any failure to reach the service or to make
sense of its payload is raised as ``RetrievalFailure`` so that callers
can treat the population stage as failed.  Nothing is retried here.
"""

from __future__ import annotations

from typing import Optional
import io
import logging
import os

import pandas as pd
import requests

from .config import (
    CENSUS_API_URL,
    CENSUS_STATE_REFERENCE_URL,
    CENSUS_SURVEY,
    CENSUS_YEAR,
    POPULATION_VARIABLE,
    REQUEST_TIMEOUT,
)
from .exceptions import RetrievalFailure

logger = logging.getLogger(__name__)


def _get(
    url: str,
    params: Optional[dict] = None,
    *,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    http = session or requests
    try:
        response = http.get(url, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Census request to %s failed: %s", url, exc)
        raise RetrievalFailure(f"Census request to {url} failed: {exc}") from exc
    return response


def fetch_state_population(
    year: int = CENSUS_YEAR,
    variable: str = POPULATION_VARIABLE,
    survey: str = CENSUS_SURVEY,
    *,
    api_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> pd.DataFrame:
    """Fetch one population estimate per state from the ACS API.

    Parameters
    ----------
    year : int
        Survey vintage.
    variable : str
        ACS variable code without the ``E`` (estimate) suffix, e.g.
        ``B01003_001`` for total population.
    survey : str
        ``acs1`` for single-year estimates, ``acs5`` for five-year.
    api_key : str, optional
        Census API key.  Defaults to the ``CENSUS_API_KEY`` environment
        variable; the API works without one at a low request rate.

    Returns
    -------
    pd.DataFrame
        Columns ``geoid``, ``name`` and ``estimate`` (all text, as served).
    """
    url = CENSUS_API_URL.format(year=year, survey=survey)
    params = {"get": f"NAME,{variable}E", "for": "state:*"}
    key = api_key or os.getenv("CENSUS_API_KEY")
    if key:
        params["key"] = key

    logger.info("Fetching %s %s estimates for %s by state", survey, year, variable)
    response = _get(url, params, session=session)

    try:
        rows = response.json()
        if not isinstance(rows, list):
            raise TypeError(f"expected a list of rows, got {type(rows).__name__}")
        header, body = rows[0], rows[1:]
        name_idx = header.index("NAME")
        value_idx = header.index(f"{variable}E")
        geo_idx = header.index("state")
        records = [
            {"geoid": r[geo_idx], "name": r[name_idx], "estimate": r[value_idx]}
            for r in body
        ]
    except (ValueError, IndexError, KeyError, TypeError, AttributeError) as exc:
        logger.error("Malformed census payload from %s: %s", url, exc)
        raise RetrievalFailure(f"Malformed census payload from {url}") from exc

    if not records:
        raise RetrievalFailure(f"Census API returned no rows for {variable}")

    logger.info("Retrieved population estimates for %d geographies", len(records))
    return pd.DataFrame.from_records(records, columns=["geoid", "name", "estimate"])


def fetch_state_reference(
    url: str = CENSUS_STATE_REFERENCE_URL,
    *,
    session: Optional[requests.Session] = None,
) -> pd.DataFrame:
    """Fetch the (abbreviation, name) list for states and territories.

    The reference file is pipe-delimited with the header
    ``STATE|STUSAB|STATE_NAME|STATENS``.  Columns are returned as served.
    """
    logger.info("Fetching state reference list from %s", url)
    response = _get(url, session=session)
    try:
        ref = pd.read_csv(io.StringIO(response.text), sep="|", dtype=str)
    except (ValueError, pd.errors.ParserError) as exc:
        raise RetrievalFailure(f"Could not parse state reference file {url}") from exc

    if ref.empty:
        raise RetrievalFailure(f"State reference file {url} is empty")
    return ref
