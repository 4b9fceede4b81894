"""Core pipeline logic: run every prep stage and persist its output.

Stages run sequentially.  The three occupation normalizers are independent
of each other; the population and case-count stages feed the final join.
A fatal error (``SchemaMismatch``, ``RetrievalFailure``, unreadable raw
file) propagates and stops the run before any later table is written, so
the joined table is only saved when both of its inputs were produced.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

import logging
import pandas as pd

from .case_counts import load_case_counts
from .config import (
    CASE_COUNT_FILE,
    CASE_COUNT_SHEET,
    CASE_COUNTS_OUT,
    JOINED_OUT,
    METRO_OCCUPATIONS_OUT,
    METRO_OES_FILE,
    NATIONAL_OCCUPATIONS_OUT,
    NATIONAL_OES_FILE,
    RAW_DATA_DIR,
    STATE_OCCUPATIONS_OUT,
    STATE_OES_FILE,
    STATE_POPULATION_OUT,
)
from .data_manager import read_raw_table, resolve_output_dir, save_table
from .joiner import join_population_cases
from .occupations import (
    normalize_metro_occupations,
    normalize_national_occupations,
    normalize_state_occupations,
)
from .population import resolve_state_population

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def prepare_occupations(raw_dir: Path, output_dir: Path) -> Dict[str, pd.DataFrame]:
    """Normalize and save the state, metro and national OES extracts."""
    stages = (
        (STATE_OCCUPATIONS_OUT, STATE_OES_FILE, normalize_state_occupations),
        (METRO_OCCUPATIONS_OUT, METRO_OES_FILE, normalize_metro_occupations),
        (NATIONAL_OCCUPATIONS_OUT, NATIONAL_OES_FILE, normalize_national_occupations),
    )
    tables: Dict[str, pd.DataFrame] = {}
    for name, filename, normalize in stages:
        table = normalize(read_raw_table(raw_dir / filename))
        save_table(table, name, output_dir)
        tables[name] = table
    return tables


def prepare_population_cases(
    raw_dir: Path,
    output_dir: Path,
    *,
    population_raw: Optional[pd.DataFrame] = None,
    reference_raw: Optional[pd.DataFrame] = None,
    digits: int = 0,
) -> Dict[str, pd.DataFrame]:
    """Resolve population, load case counts, join them, and save all three."""
    population = resolve_state_population(population_raw, reference_raw)
    save_table(population, STATE_POPULATION_OUT, output_dir)

    cases = load_case_counts(
        read_raw_table(raw_dir / CASE_COUNT_FILE, sheet_name=CASE_COUNT_SHEET)
    )
    save_table(cases, CASE_COUNTS_OUT, output_dir, excel=True)

    joined = join_population_cases(population, cases, digits=digits)
    save_table(joined, JOINED_OUT, output_dir)
    return {
        STATE_POPULATION_OUT: population,
        CASE_COUNTS_OUT: cases,
        JOINED_OUT: joined,
    }


def run_pipeline(
    raw_dir: Optional[PathLike] = None,
    output_dir: Optional[PathLike] = None,
    *,
    population_raw: Optional[pd.DataFrame] = None,
    reference_raw: Optional[pd.DataFrame] = None,
    digits: int = 0,
) -> Dict[str, pd.DataFrame]:
    """Run all prep stages and return the saved tables keyed by output name."""
    raw_dir = Path(raw_dir) if raw_dir is not None else RAW_DATA_DIR
    output_dir = Path(output_dir) if output_dir is not None else resolve_output_dir()
    logger.info("Starting data prep: raw=%s output=%s", raw_dir, output_dir)

    tables = prepare_occupations(raw_dir, output_dir)
    tables.update(
        prepare_population_cases(
            raw_dir,
            output_dir,
            population_raw=population_raw,
            reference_raw=reference_raw,
            digits=digits,
        )
    )
    logger.info("Data prep finished: %d tables written", len(tables))
    return tables
