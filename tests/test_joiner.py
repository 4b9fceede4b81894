"""Tests for state_data_prep.joiner."""

import pandas as pd
import pytest

from state_data_prep.case_counts import load_case_counts
from state_data_prep.joiner import (
    OUTPUT_COLUMNS,
    cases_per_100k,
    join_diagnostics,
    join_population_cases,
)


def _population(**overrides) -> pd.DataFrame:
    defaults = {
        "geoid": ["01", "06", "36"],
        "state_abbrev": ["AL", "CA", "NY"],
        "state_name": ["alabama", "california", "new york"],
        "population_estimate_2018": [4887871.0, 39557045.0, 19542209.0],
    }
    defaults.update(overrides)
    return pd.DataFrame(defaults)


def _cases(**overrides) -> pd.DataFrame:
    defaults = {
        "state_name": ["alabama", "california", "vermont"],
        "terminal_case_count": [5000.0, 30000.0, 800.0],
    }
    defaults.update(overrides)
    return pd.DataFrame(defaults)


# ── Join semantics ──

class TestJoin:
    def test_output_columns(self):
        out = join_population_cases(_population(), _cases())
        assert list(out.columns) == OUTPUT_COLUMNS

    def test_inner_join_drops_one_sided_states(self):
        out = join_population_cases(_population(), _cases())
        assert out["state_name"].tolist() == ["alabama", "california"]
        assert "new york" not in out["state_name"].tolist()
        assert "vermont" not in out["state_name"].tolist()

    def test_one_row_per_shared_state(self):
        out = join_population_cases(_population(), _cases())
        assert out["state_name"].is_unique

    def test_keys_normalized_on_both_sides(self):
        cases = _cases(state_name=[" Alabama", "CALIFORNIA ", "Vermont"])
        out = join_population_cases(_population(), cases)
        assert out["state_abbrev"].tolist() == ["AL", "CA"]

    def test_diagnostics(self):
        assert join_diagnostics(_population(), _cases()) == {
            "population_unmatched": 1,
            "cases_unmatched": 1,
        }

    def test_no_overlap_gives_empty_table(self):
        out = join_population_cases(_population(), _cases(state_name=["a", "b", "c"]))
        assert out.empty
        assert list(out.columns) == OUTPUT_COLUMNS


# ── Cases per 100k ──

class TestCasesPer100k:
    def test_alabama_example(self):
        out = join_population_cases(_population(), _cases())
        alabama = out[out["state_name"] == "alabama"].iloc[0]
        assert alabama["case_count"] == 5000
        assert alabama["population_2018"] == 4887871
        assert alabama["cases_per_100k"] == 102

    def test_half_rounds_up(self):
        rate = cases_per_100k(pd.Series([5.0, 10.0]), pd.Series([200000.0, 400000.0]))
        assert rate.tolist() == [3, 3]

    def test_integer_dtype(self):
        out = join_population_cases(_population(), _cases())
        assert str(out["cases_per_100k"].dtype) == "Int64"

    def test_matches_formula_for_every_row(self):
        out = join_population_cases(_population(), _cases())
        expected = (out["case_count"] / out["population_2018"] * 100000 + 0.5).astype(int)
        assert out["cases_per_100k"].astype(int).tolist() == expected.tolist()

    def test_zero_cases_is_zero_rate(self):
        rate = cases_per_100k(pd.Series([0.0]), pd.Series([1000.0]))
        assert rate.tolist() == [0]

    def test_zero_or_missing_population_gives_missing_rate(self):
        rate = cases_per_100k(pd.Series([5.0, 5.0]), pd.Series([0.0, float("nan")]))
        assert rate.isna().all()

    def test_missing_case_count_propagates(self):
        out = join_population_cases(
            _population(), _cases(terminal_case_count=[float("nan"), 30000.0, 1.0])
        )
        assert pd.isna(out.loc[0, "cases_per_100k"])
        assert out.loc[1, "cases_per_100k"] == 76

    def test_digits(self):
        rate = cases_per_100k(pd.Series([5000.0]), pd.Series([4887871.0]), digits=1)
        assert rate.iloc[0] == pytest.approx(102.3)


def test_repeated_state_in_raw_cases_joins_once():
    raw = pd.DataFrame(
        {"Region": ["Alabama", "alabama", "California"], "Latest": ["4000", "5000", "30000"]}
    )
    out = join_population_cases(_population(), load_case_counts(raw))
    assert out["state_name"].tolist() == ["alabama", "california"]
    assert out.loc[0, "cases_per_100k"] == 102
