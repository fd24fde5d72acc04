"""
Tests for the indicator factory functions.
"""
import numpy as np
import pandas as pd
import pytest

from macross.indicators import factory


@pytest.fixture
def sample_close_prices() -> pd.Series:
    """
    Provides a sample Series of close prices for testing.
    """
    return pd.Series(
        np.array([
            100.0, 101.0, 102.5, 101.75, 103.0, 104.25, 103.5, 105.0,
            106.5, 105.75, 107.0, 108.5, 107.75, 109.0, 110.0, 111.5,
            112.5, 111.75, 113.25, 114.0, 115.5, 116.0, 115.25, 117.0,
            118.5, 117.75, 119.0, 120.5, 119.75, 121.0, 122.5, 121.75,
            123.0, 124.5, 123.75, 125.0, 126.5, 125.75, 127.0, 128.5
        ]),
        dtype=np.float64
    )


def test_sma_calculation(sample_close_prices):
    """
    Tests the SMA calculation with a known output.
    """
    sma_series = factory.sma(close=sample_close_prices, length=5)
    assert isinstance(sma_series, pd.Series)
    assert len(sma_series) == len(sample_close_prices)
    assert sma_series.notna().sum() == (len(sample_close_prices) - 5 + 1)
    # Compare with a pre-calculated value
    assert pytest.approx(sma_series.iloc[-1], 0.001) == 126.55
    assert sma_series.iloc[4] == pytest.approx(np.mean(sample_close_prices.iloc[:5]))


def test_sma_marks_warmup_as_undefined(sample_close_prices):
    sma_series = factory.sma(close=sample_close_prices, length=10)
    assert sma_series.iloc[:9].isna().all()
    assert sma_series.iloc[9:].notna().all()


def test_sma_of_constant_series_is_constant():
    prices = pd.Series([250.0] * 30)
    sma_series = factory.sma(close=prices, length=7)
    assert (sma_series.dropna() == 250.0).all()


def test_sma_has_no_look_ahead(sample_close_prices):
    """
    Changing a later price leaves every earlier average untouched.
    """
    baseline = factory.sma(close=sample_close_prices, length=5)

    shocked = sample_close_prices.copy()
    shocked.iloc[30] = 1000.0
    changed = factory.sma(close=shocked, length=5)

    pd.testing.assert_series_equal(baseline.iloc[:30], changed.iloc[:30])
    assert changed.iloc[30] != baseline.iloc[30]


def test_sma_shorter_input_is_all_undefined():
    sma_series = factory.sma(close=pd.Series([1.0, 2.0, 3.0]), length=5)
    assert len(sma_series) == 3
    assert sma_series.isna().all()


def test_sma_rejects_non_positive_length(sample_close_prices):
    with pytest.raises(ValueError):
        factory.sma(close=sample_close_prices, length=0)
