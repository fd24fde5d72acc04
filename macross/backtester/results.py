"""
Data structures for holding the results of a backtest.

Results are frozen once produced. Percentages are plain numbers scaled by
100, currency values are in the series' native unit, and dates serialize as
``YYYY-MM-DD`` through ``model_dump(mode="json")``.
"""
import datetime as dt
from typing import Literal, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from macross.strategy import StrategyParameters


class Trade(BaseModel):
    """
    Represents a single closed round trip.

    Args:
        entry_date (datetime.date): The day the position was opened.
        entry_price (float): The price at which the position was opened.
        exit_date (datetime.date): The day the position was closed.
        exit_price (float): The price at which the position was closed.
        side (str): Always ``"long"``.
        shares (int): The number of whole shares held.
        profit (float): Absolute profit, ``(exit - entry) * shares``.
        profit_pct (float): ``(exit - entry) / entry * 100``.
    """
    model_config = ConfigDict(frozen=True)

    entry_date: dt.date
    entry_price: float
    exit_date: dt.date
    exit_price: float
    side: Literal["long"] = "long"
    shares: int
    profit: float
    profit_pct: float


class EquityPoint(BaseModel):
    """
    Account value at the close of one evaluated bar.

    Args:
        date (datetime.date): The bar's date.
        equity (float): Cash plus the marked-to-market position.
        benchmark_price (float): The bar's close, for buy-and-hold comparison.
    """
    model_config = ConfigDict(frozen=True)

    date: dt.date
    equity: float
    benchmark_price: float


class BacktestResult(BaseModel):
    """
    Holds all the results from a single backtest run of a parameter pair.

    Args:
        parameters (StrategyParameters): The evaluated window pair.
        initial_capital (float): Starting cash.
        final_equity (float): Account value after the last bar.
        total_return_pct (float): Return over the evaluation window.
        annualized_return_pct (float): Compound annual growth rate.
        total_trades (int): Number of closed trades.
        winning_trades (int): Trades with a positive profit.
        losing_trades (int): Trades with a negative profit.
        win_rate_pct (float): Share of winning trades.
        max_drawdown_pct (float): Largest decline from a running equity peak.
        sharpe_ratio (float): Annualized Sharpe ratio of per-bar returns.
        trades (Tuple[Trade, ...]): Closed trades in chronological order.
        equity_curve (Tuple[EquityPoint, ...]): One point per evaluated bar.
        benchmark_return_pct (float): Buy-and-hold return over the same window.
        outperformance_pct (float): ``total_return_pct - benchmark_return_pct``.
    """
    model_config = ConfigDict(frozen=True)

    parameters: StrategyParameters
    initial_capital: float
    final_equity: float
    total_return_pct: float
    annualized_return_pct: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate_pct: float
    max_drawdown_pct: float
    sharpe_ratio: float
    trades: Tuple[Trade, ...] = Field(..., description="Closed trades in chronological order.")
    equity_curve: Tuple[EquityPoint, ...] = Field(..., description="Account value per evaluated bar.")
    benchmark_return_pct: float
    outperformance_pct: float

    def trades_frame(self) -> pd.DataFrame:
        """Returns the trade log as a DataFrame, one row per trade."""
        columns = list(Trade.model_fields)
        return pd.DataFrame([t.model_dump() for t in self.trades], columns=columns)

    def equity_frame(self) -> pd.DataFrame:
        """Returns the equity curve as a DataFrame indexed by date."""
        df = pd.DataFrame(
            [p.model_dump() for p in self.equity_curve],
            columns=list(EquityPoint.model_fields),
        )
        df["date"] = pd.to_datetime(df["date"])
        return df.set_index("date")
