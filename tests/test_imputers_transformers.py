"""Tests for numeric parsing, median imputation and the target transform."""

import numpy as np
import pandas as pd
import pytest

from splitcraft import (
    ConfigurationError,
    DataQualityWarning,
    MedianImputer,
    NotFittedError,
    NumericConverter,
    WinsorizedLogTarget,
)


@pytest.fixture
def raw_df() -> pd.DataFrame:
    return pd.DataFrame({
        "a": ["1", "?", "3", " 7 ", "abc"],
        "b": ["", "", "?", "", "inf"],
        "c": ["1e3", "2", "", "4", "5"],
    })


class TestNumericConverter:
    def test_coerces_junk_to_nan(self, raw_df: pd.DataFrame) -> None:
        out = NumericConverter(["a", "b", "c"]).fit(raw_df).transform(raw_df)
        np.testing.assert_array_equal(out["a"].isna().to_numpy(), [False, True, False, False, True])
        assert out.loc[3, "a"] == 7.0
        assert out["b"].isna().all()
        assert out.loc[0, "c"] == 1000.0

    def test_missing_column(self, raw_df: pd.DataFrame) -> None:
        conv = NumericConverter(["a", "zzz"]).fit(raw_df)
        with pytest.raises(ConfigurationError):
            conv.transform(raw_df)


class TestMedianImputer:
    def test_fills_with_median(self, raw_df: pd.DataFrame) -> None:
        num = NumericConverter(["a", "c"]).fit(raw_df).transform(raw_df)
        imp = MedianImputer().fit(num)
        assert imp.medians_ == {"a": 3.0, "c": 4.5}
        out = imp.transform(num)
        assert out.loc[1, "a"] == 3.0
        assert out.loc[2, "c"] == 4.5
        assert not out.isna().any().any()

    def test_all_missing_column_defaults_to_zero(self, raw_df: pd.DataFrame) -> None:
        num = NumericConverter(["b"]).fit(raw_df).transform(raw_df)
        with pytest.warns(DataQualityWarning):
            imp = MedianImputer(["b"]).fit(num)
        assert imp.medians_["b"] == 0.0
        assert (imp.transform(num)["b"] == 0.0).all()

    def test_fit_subset_only(self) -> None:
        num = pd.DataFrame({"x": [1.0, 2.0, 3.0, 100.0, np.nan]})
        imp = MedianImputer().fit(num.iloc[[0, 1, 2]])
        assert imp.transform(num).loc[4, "x"] == 2.0

    def test_transform_before_fit(self) -> None:
        with pytest.raises(NotFittedError):
            MedianImputer(["x"]).transform(pd.DataFrame({"x": [1.0]}))


class TestWinsorizedLogTarget:
    def test_bounds_from_linear_quantiles(self) -> None:
        tt = WinsorizedLogTarget(0.05, 0.95).fit(np.arange(101, dtype=float))
        assert tt.bounds_.low == pytest.approx(5.0)
        assert tt.bounds_.high == pytest.approx(95.0)

    def test_clip_then_log1p_keeps_nan(self) -> None:
        tt = WinsorizedLogTarget(0.05, 0.95).fit(np.arange(101, dtype=float))
        out = tt.transform([0.0, 50.0, 200.0, np.nan])
        np.testing.assert_allclose(out[:3], np.log1p([5.0, 50.0, 95.0]))
        assert np.isnan(out[3])

    def test_ignores_non_finite_when_fitting(self) -> None:
        tt = WinsorizedLogTarget(0.0, 1.0).fit([np.nan, 2.0, 4.0, np.inf])
        assert (tt.bounds_.low, tt.bounds_.high) == (2.0, 4.0)

    def test_interpolates_between_ranks(self) -> None:
        tt = WinsorizedLogTarget(0.05, 0.95).fit([9000.0, 10000.0, 11000.0, 12000.0])
        assert tt.bounds_.low == pytest.approx(9150.0)
        assert tt.bounds_.high == pytest.approx(11850.0)

    def test_no_finite_values(self) -> None:
        with pytest.raises(ConfigurationError):
            WinsorizedLogTarget().fit([np.nan, np.nan])

    def test_inverse(self) -> None:
        tt = WinsorizedLogTarget().fit([1.0, 2.0, 3.0])
        np.testing.assert_allclose(tt.inverse_transform(np.log1p([2.0])), [2.0])
