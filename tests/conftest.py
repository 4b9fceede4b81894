"""Shared fixtures for state_data_prep tests."""

import sys
from pathlib import Path

import pandas as pd
import pytest

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


@pytest.fixture
def population_raw() -> pd.DataFrame:
    """Census API rows as served (text), including Puerto Rico."""
    return pd.DataFrame(
        {
            "geoid": ["01", "06", "36", "72"],
            "name": ["Alabama", " California ", "New York", "Puerto Rico"],
            "estimate": ["4887871", "39557045", "19542209", "3195153"],
        }
    )


@pytest.fixture
def reference_raw() -> pd.DataFrame:
    """Census state reference file layout."""
    return pd.DataFrame(
        {
            "STATE": ["01", "06", "36", "72"],
            "STUSAB": ["AL", "CA", "NY", "PR"],
            "STATE_NAME": ["Alabama", "California", "New York", "Puerto Rico"],
            "STATENS": ["01779775", "01779778", "01779796", "01779808"],
        }
    )


@pytest.fixture
def cases_raw() -> pd.DataFrame:
    """Case count sheet with its two Region columns."""
    return pd.DataFrame(
        [
            ["South", "Alabama", "5000"],
            ["West", "california", "30000"],
            ["Northeast", "Vermont", "800"],
        ],
        columns=["Region", "Region", "Latest"],
    )
