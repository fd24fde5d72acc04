"""
Price bar model and conversions between bar lists and OHLCV DataFrames.

The engine works on a pandas DataFrame indexed by a DatetimeIndex with
lowercase ``open/high/low/close/volume`` columns. Data sources hand out lists
of ``PriceBar``; ``to_frame`` accepts either form so that any conforming
series can be backtested.
"""
import datetime as dt
from typing import List, Sequence, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, model_validator

REQUIRED_COLUMNS: List[str] = ["open", "high", "low", "close", "volume"]


class PriceBar(BaseModel):
    """
    A single daily OHLCV bar.

    Args:
        date (datetime.date): The trading day.
        open (float): Opening price.
        high (float): Highest traded price, at least max(open, close).
        low (float): Lowest traded price, at most min(open, close).
        close (float): Closing price.
        volume (float): Traded volume.
    """
    model_config = ConfigDict(frozen=True)

    date: dt.date
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(0.0, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "PriceBar":
        if self.high < max(self.open, self.close):
            raise ValueError(f"high {self.high} is below max(open, close) on {self.date}.")
        if self.low > min(self.open, self.close):
            raise ValueError(f"low {self.low} is above min(open, close) on {self.date}.")
        return self


PriceSeries = Union[Sequence[PriceBar], pd.DataFrame]


def bars_to_frame(bars: Sequence[PriceBar]) -> pd.DataFrame:
    """
    Converts a list of bars into an OHLCV DataFrame.

    Args:
        bars (Sequence[PriceBar]): Bars in ascending date order.

    Returns:
        pd.DataFrame: A DataFrame with a DatetimeIndex named ``date``.
    """
    df = pd.DataFrame(
        [[b.open, b.high, b.low, b.close, b.volume] for b in bars],
        columns=REQUIRED_COLUMNS,
        index=pd.DatetimeIndex([pd.Timestamp(b.date) for b in bars], name="date"),
        dtype=float,
    )
    return validate_frame(df)


def frame_to_bars(df: pd.DataFrame) -> List[PriceBar]:
    """
    Converts an OHLCV DataFrame into a list of validated bars.

    Args:
        df (pd.DataFrame): A DataFrame with a DatetimeIndex and OHLCV columns.

    Returns:
        List[PriceBar]: One bar per row, in index order.
    """
    df = validate_frame(df)
    return [
        PriceBar(
            date=ts.date(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for ts, row in zip(df.index, df.itertuples(index=False))
    ]


def validate_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Checks the structural invariants of a price series.

    - Column names are lowercased and the OHLCV columns must be present.
    - The index must be a DatetimeIndex with strictly increasing dates.
    - Prices must be positive and free of NaNs.

    Args:
        df (pd.DataFrame): The DataFrame to validate.

    Returns:
        pd.DataFrame: The validated DataFrame restricted to the OHLCV columns.

    Raises:
        ValueError: If any of the checks fails.
    """
    df = df.rename(columns={col: str(col).lower() for col in df.columns})

    missing = set(REQUIRED_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"DataFrame is missing required columns: {missing}")

    if not isinstance(df.index, pd.DatetimeIndex):
        raise ValueError("DataFrame must have a DatetimeIndex.")

    if not df.index.is_monotonic_increasing or not df.index.is_unique:
        raise ValueError("Bar dates must be strictly increasing.")

    prices = df[["open", "high", "low", "close"]]
    if prices.isna().any().any():
        raise ValueError("Prices must not contain missing values.")
    if (prices <= 0).any().any():
        raise ValueError("All prices must be positive.")

    return df[REQUIRED_COLUMNS]


def to_frame(series: PriceSeries) -> pd.DataFrame:
    """
    Normalizes any supported price series into a validated OHLCV DataFrame.

    Args:
        series (PriceSeries): A sequence of PriceBar or an OHLCV DataFrame.

    Returns:
        pd.DataFrame: The validated DataFrame.
    """
    if isinstance(series, pd.DataFrame):
        return validate_frame(series)
    return bars_to_frame(series)
