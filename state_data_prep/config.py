"""
Configuration constants for the state occupation / population / case-count
data prep pipeline.
"""

import os
from pathlib import Path
from typing import Dict, List, Literal, Tuple

# ======================================================
#  PATHS
# ======================================================
REPO_ROOT: Path = Path(__file__).resolve().parent.parent

RAW_DATA_DIR: Path = Path(
    os.getenv("RAW_DATA_DIR", str(REPO_ROOT / "raw_data"))
).expanduser()

# Raw extracts, relative to RAW_DATA_DIR
STATE_OES_FILE: str = "oesm18st/state_M2018_dl.xlsx"
METRO_OES_FILE: str = "oesm18ma/MSA_M2018_dl.xlsx"
NATIONAL_OES_FILE: str = "oesm18nat/national_M2018_dl.xlsx"
CASE_COUNT_FILE: str = "COVID_COUNTS_APR20.xlsx"
CASE_COUNT_SHEET: str = "cases"

# ======================================================
#  OUTPUT TABLE NAMES
# ======================================================
STATE_OCCUPATIONS_OUT: str = "states_allrecs"
METRO_OCCUPATIONS_OUT: str = "msa_allrecs"
NATIONAL_OCCUPATIONS_OUT: str = "national_allrecs"
STATE_POPULATION_OUT: str = "statepops2018"
CASE_COUNTS_OUT: str = "term_cases"
JOINED_OUT: str = "joined_state_pops_cases"

# ======================================================
#  CENSUS DATA SERVICE
# ======================================================
CENSUS_API_URL: str = "https://api.census.gov/data/{year}/acs/{survey}"
CENSUS_STATE_REFERENCE_URL: str = (
    "https://www2.census.gov/geo/docs/reference/state.txt"
)
CENSUS_YEAR: int = 2018
CENSUS_SURVEY: Literal["acs1", "acs5"] = "acs1"
# Total population
POPULATION_VARIABLE: str = "B01003_001"
REQUEST_TIMEOUT: int = 60

EXCLUDED_STATE_NAMES: List[str] = ["puerto rico"]

# ======================================================
#  COLUMN MAPPINGS
# ======================================================
# canonical field -> accepted source headers (after ``clean_names``), first
# match wins.
ColumnMap = Dict[str, Tuple[str, ...]]

_OCCUPATION_FIELDS: ColumnMap = {
    "occupation_code": ("occ_code",),
    "occupation_title": ("occ_title",),
    "occupation_group": ("occ_group", "o_group"),
    "total_employment": ("tot_emp",),
}

_WAGE_FIELDS: ColumnMap = {
    "mean_hourly_wage": ("h_mean",),
    "mean_annual_wage": ("a_mean",),
}

STATE_OCCUPATION_COLUMNS: ColumnMap = {
    "area_code": ("area",),
    "state_abbrev": ("st", "prim_state"),
    "state_name": ("state", "area_title"),
    **_OCCUPATION_FIELDS,
    "jobs_per_1000": ("jobs_1000",),
    **_WAGE_FIELDS,
}

METRO_OCCUPATION_COLUMNS: ColumnMap = {
    "prim_state": ("prim_state",),
    "area_code": ("area",),
    "area_name": ("area_name", "area_title"),
    **_OCCUPATION_FIELDS,
    "jobs_per_1000": ("jobs_1000",),
    **_WAGE_FIELDS,
}

NATIONAL_OCCUPATION_COLUMNS: ColumnMap = {
    **_OCCUPATION_FIELDS,
    **_WAGE_FIELDS,
}

POPULATION_COLUMNS: ColumnMap = {
    "geoid": ("geoid", "state"),
    "state_name": ("name",),
    "population_estimate_2018": ("estimate",),
}

STATE_REFERENCE_COLUMNS: ColumnMap = {
    "state_abbrev": ("stusab", "state_abbrev", "state"),
    "state_name": ("state_name",),
}

CASE_COUNT_COLUMNS: ColumnMap = {
    # second "Region" header: region_2 when deduplicated by clean_names,
    # region_1 when pandas has already mangled it to "Region.1"
    "state_name": ("region_2", "region_1", "region", "state_name", "state"),
    "terminal_case_count": ("latest",),
}

# Values the OES extracts use for suppressed or unavailable estimates
NA_PLACEHOLDERS: List[str] = ["*", "**", "#", "~", "-", ""]

NATIONAL_SCOPE: str = "national"
