"""
Tests for the price bar model and the data provider implementations.
"""
from datetime import date

import pandas as pd
import pytest
from pydantic import ValidationError

from macross.config import Config, DataConfig, GeneratorConfig
from macross.data.models import PriceBar, bars_to_frame, frame_to_bars, to_frame
from macross.data.provider import CSVProvider, ParquetProvider, SyntheticProvider, get_provider

NON_EXISTENT_FILE = 'non_existent.csv'


@pytest.fixture
def sample_frame() -> pd.DataFrame:
    """
    Provides a small, valid OHLCV DataFrame with capitalized columns.
    """
    dates = pd.bdate_range('2023-01-02', periods=5)
    close = [100.0, 101.5, 101.0, 102.25, 103.0]
    return pd.DataFrame({
        'Open': [99.5, 100.0, 101.5, 101.0, 102.25],
        'High': [100.5, 102.0, 102.0, 102.5, 103.5],
        'Low': [99.0, 99.5, 100.5, 100.75, 102.0],
        'Close': close,
        'Volume': [1000, 1100, 900, 1200, 1300],
    }, index=pd.DatetimeIndex(dates, name='date'))


def test_price_bar_validation():
    bar = PriceBar(date=date(2023, 1, 2), open=10.0, high=11.0, low=9.5, close=10.5, volume=100)
    assert bar.high >= max(bar.open, bar.close)

    with pytest.raises(ValidationError, match="high"):
        PriceBar(date=date(2023, 1, 2), open=10.0, high=10.2, low=9.5, close=10.5)

    with pytest.raises(ValidationError, match="low"):
        PriceBar(date=date(2023, 1, 2), open=10.0, high=11.0, low=10.1, close=10.5)

    with pytest.raises(ValidationError):
        PriceBar(date=date(2023, 1, 2), open=0.0, high=11.0, low=0.0, close=10.5)


def test_frame_and_bars_convert_both_ways(sample_frame):
    bars = frame_to_bars(sample_frame)

    assert len(bars) == 5
    assert bars[0].date == date(2023, 1, 2)
    assert bars[-1].close == 103.0

    df = bars_to_frame(bars)
    assert list(df.columns) == ["open", "high", "low", "close", "volume"]
    assert isinstance(df.index, pd.DatetimeIndex)
    assert list(df["close"]) == list(sample_frame["Close"])


def test_to_frame_rejects_unordered_dates(sample_frame):
    shuffled = sample_frame.iloc[[1, 0, 2, 3, 4]]
    with pytest.raises(ValueError, match="strictly increasing"):
        to_frame(shuffled)

    duplicated = sample_frame.iloc[[0, 0, 1]]
    with pytest.raises(ValueError, match="strictly increasing"):
        to_frame(duplicated)


def test_to_frame_rejects_non_positive_prices(sample_frame):
    bad = sample_frame.copy()
    bad.iloc[2, bad.columns.get_loc('Close')] = -1.0
    with pytest.raises(ValueError, match="positive"):
        to_frame(bad)


@pytest.mark.parametrize("provider_class, suffix", [
    (CSVProvider, "csv"),
    (ParquetProvider, "parquet"),
])
def test_valid_data_loading(provider_class, suffix, sample_frame, tmp_path):
    """
    Tests that both CSV and Parquet providers can load a valid data file.
    """
    path = tmp_path / f"sample.{suffix}"
    if suffix == "parquet":
        pytest.importorskip("pyarrow")
        sample_frame.to_parquet(path)
    else:
        sample_frame.to_csv(path, date_format="%Y-%m-%d")

    bars = provider_class(path=str(path)).load()

    assert len(bars) == len(sample_frame)
    assert all(isinstance(b, PriceBar) for b in bars)
    assert [b.date for b in bars] == [ts.date() for ts in sample_frame.index]
    assert [b.close for b in bars] == list(sample_frame["Close"])


def test_missing_columns_raises_error(sample_frame, tmp_path):
    """
    Tests that a ValueError is raised if the data is missing required columns.
    """
    path = tmp_path / "bad_columns.csv"
    sample_frame.drop(columns=['High']).to_csv(path, date_format="%Y-%m-%d")

    provider = CSVProvider(path=str(path))
    with pytest.raises(ValueError, match="missing required columns"):
        provider.load()


def test_csv_invalid_index_raises_error(sample_frame, tmp_path):
    """
    Tests that a ValueError is raised if the data does not have a DatetimeIndex.
    """
    path = tmp_path / "bad_index.csv"
    sample_frame.reset_index(drop=True).to_csv(path)

    provider = CSVProvider(path=str(path))
    with pytest.raises(ValueError, match="must have a DatetimeIndex"):
        provider.load()


def test_non_existent_file_raises_error():
    """
    Tests that a FileNotFoundError is raised for a non-existent file path.
    """
    provider = CSVProvider(path=NON_EXISTENT_FILE)
    with pytest.raises(FileNotFoundError):
        provider.load()


def test_synthetic_provider_is_reproducible():
    config = GeneratorConfig(start_date=date(2023, 1, 2), end_date=date(2023, 6, 30), seed=11)
    assert SyntheticProvider(config).load() == SyntheticProvider(config).load()


def test_get_provider_dispatches_on_path():
    assert isinstance(get_provider(Config()), SyntheticProvider)
    assert isinstance(get_provider(Config(data=DataConfig(path="prices.parquet"))), ParquetProvider)
    assert isinstance(get_provider(Config(data=DataConfig(path="prices.csv"))), CSVProvider)
