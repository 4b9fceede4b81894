"""Tests for state_data_prep.case_counts."""

import numpy as np
import pandas as pd
import pytest

from state_data_prep.case_counts import load_case_counts
from state_data_prep.exceptions import SchemaMismatch


class TestLoadCaseCounts:
    def test_uses_second_region_column(self, cases_raw):
        out = load_case_counts(cases_raw)
        assert list(out.columns) == ["state_name", "terminal_case_count"]
        assert out["state_name"].tolist() == ["alabama", "california", "vermont"]
        assert out["terminal_case_count"].tolist() == [5000.0, 30000.0, 800.0]

    def test_pandas_mangled_duplicate_header(self):
        raw = pd.DataFrame(
            {"Region": ["South"], "Region.1": [" Texas "], "Latest": ["1,234"]}
        )
        out = load_case_counts(raw)
        assert out.loc[0, "state_name"] == "texas"
        assert out.loc[0, "terminal_case_count"] == 1234.0

    def test_single_region_column(self):
        raw = pd.DataFrame({"Region": ["Ohio"], "Latest": ["10"]})
        assert load_case_counts(raw).loc[0, "state_name"] == "ohio"

    def test_unparseable_count_kept_as_nan(self):
        raw = pd.DataFrame({"Region": ["Ohio", "Utah"], "Latest": ["n/a", "7"]})
        out = load_case_counts(raw)
        assert len(out) == 2
        assert np.isnan(out.loc[0, "terminal_case_count"])

    def test_missing_latest_raises(self, cases_raw):
        with pytest.raises(SchemaMismatch) as err:
            load_case_counts(cases_raw.iloc[:, :2])
        assert err.value.missing == ["terminal_case_count"]

    def test_repeated_state_keeps_last_row(self):
        raw = pd.DataFrame(
            {"Region": ["Ohio", " OHIO ", "Utah"], "Latest": ["10", "25", "7"]}
        )
        out = load_case_counts(raw)
        assert out["state_name"].tolist() == ["ohio", "utah"]
        assert out["terminal_case_count"].tolist() == [25.0, 7.0]
