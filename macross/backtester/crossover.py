"""
An iterative backtesting engine for the moving-average crossover strategy.

The strategy holds at most one long position. It buys as many whole shares
as the cash allows when the short average crosses above the long one and
sells everything when it crosses back below. Equity is marked to market at
every close.
"""
import logging
from typing import Dict, List, Tuple

import numpy as np
import pandas as pd

from macross.backtester.base import BaseBacktester
from macross.backtester.results import BacktestResult, EquityPoint, Trade
from macross.data.models import PriceSeries
from macross.errors import InsufficientDataError, InvalidParameterError
from macross.indicators.factory import sma
from macross.metrics import (
    calculate_annualized_return,
    calculate_benchmark_return,
    calculate_max_drawdown,
    calculate_sharpe_ratio,
    calculate_total_return,
    calculate_trade_stats,
    equity_returns,
)
from macross.strategy import StrategyParameters

logger = logging.getLogger(__name__)


def _close_trade(entry_time, entry_price: float, exit_time, exit_price: float, shares: int) -> Trade:
    return Trade(
        entry_date=entry_time.date(),
        entry_price=entry_price,
        exit_date=exit_time.date(),
        exit_price=exit_price,
        shares=shares,
        profit=(exit_price - entry_price) * shares,
        profit_pct=(exit_price - entry_price) / entry_price * 100,
    )


def simulate_crossover(
    data: pd.DataFrame,
    short_ma: pd.Series,
    long_ma: pd.Series,
    long_window: int,
    initial_capital: float = 100000.0,
    trend_entry: bool = False,
) -> Tuple[List[Trade], List[EquityPoint]]:
    """
    Walks the series from ``long_window`` to the end and trades crossovers.

    A bullish crossover (previous short <= previous long, current short >
    current long) opens a position while flat; a bearish crossover (previous
    short >= previous long, current short < current long) closes it. Bars
    where any of the four averages is undefined produce no signal but keep
    the position and still get an equity point. A position that is open
    after the last bar is closed at the last close.

    Args:
        data (pd.DataFrame): A validated OHLCV DataFrame.
        short_ma (pd.Series): The short moving average, aligned with ``data``.
        long_ma (pd.Series): The long moving average, aligned with ``data``.
        long_window (int): The index of the first evaluated bar.
        initial_capital (float): Starting cash.
        trend_entry (bool): Treat the bar before the first evaluated one as
            ``short <= long``, so an established uptrend is entered at once.

    Returns:
        Tuple[List[Trade], List[EquityPoint]]: The closed trades and one
        equity point per evaluated bar, both in chronological order.
    """
    n = len(data)
    if len(short_ma) != n or len(long_ma) != n:
        raise ValueError(
            f"Moving averages must match the series length {n}, "
            f"got {len(short_ma)} and {len(long_ma)}."
        )

    # Prepare data for fast iteration
    closes = data["close"].to_numpy(dtype=float)
    shorts = np.asarray(short_ma, dtype=float)
    longs = np.asarray(long_ma, dtype=float)
    times = data.index

    # State
    cash = float(initial_capital)
    shares = 0
    entry_price = 0.0
    entry_time = None

    trades: List[Trade] = []
    equity_curve: List[EquityPoint] = []

    for i in range(long_window, n):
        price = closes[i]
        short_now, long_now = shorts[i], longs[i]
        if trend_entry and i == long_window:
            short_prev, long_prev = -np.inf, np.inf
        else:
            short_prev, long_prev = shorts[i - 1], longs[i - 1]

        if not np.isnan([short_now, long_now, short_prev, long_prev]).any():
            bullish = short_prev <= long_prev and short_now > long_now
            bearish = short_prev >= long_prev and short_now < long_now

            if bullish and shares == 0:
                affordable = int(cash // price)
                if affordable > 0:
                    shares = affordable
                    cash -= shares * price
                    entry_price = price
                    entry_time = times[i]
                    logger.debug("Entered %d shares at %.2f on %s", shares, price, entry_time.date())
                else:
                    logger.debug("Skipped entry on %s: cannot afford one share at %.2f", times[i].date(), price)

            elif bearish and shares > 0:
                cash += shares * price
                trades.append(_close_trade(entry_time, entry_price, times[i], price, shares))
                logger.debug("Exited at %.2f on %s", price, times[i].date())
                shares = 0

        equity_curve.append(EquityPoint(
            date=times[i].date(),
            equity=cash + shares * price,
            benchmark_price=price,
        ))

    # Close open trade at end
    if shares > 0:
        exit_price = closes[-1]
        cash += shares * exit_price
        trades.append(_close_trade(entry_time, entry_price, times[-1], exit_price, shares))
        shares = 0

    return trades, equity_curve


class CrossoverBacktester(BaseBacktester):
    """
    Backtests the moving-average crossover strategy for one window pair at a
    time. Moving averages are computed once per window and reused across
    runs on the same instance.
    """

    def __init__(self, data: PriceSeries, initial_equity: float = 100000.0, trend_entry: bool = False):
        super().__init__(data, initial_equity=initial_equity)
        self._trend_entry = trend_entry
        self._sma_cache: Dict[int, pd.Series] = {}

    def _sma(self, window: int) -> pd.Series:
        if window not in self._sma_cache:
            self._sma_cache[window] = sma(self._data["close"], length=window)
        return self._sma_cache[window]

    def check(self, parameters: StrategyParameters) -> None:
        """
        Validates a parameter pair against this backtester's series.

        Raises:
            InvalidParameterError: If ``short_window >= long_window``.
            InsufficientDataError: If there is no bar at index ``long_window``.
        """
        if not parameters.is_ordered:
            raise InvalidParameterError(parameters)
        if len(self._data) <= parameters.long_window:
            raise InsufficientDataError(len(self._data), parameters.long_window)

    def run(self, parameters: StrategyParameters) -> BacktestResult:
        """
        Runs the crossover simulation and derives its performance metrics.

        Args:
            parameters (StrategyParameters): The window pair to evaluate.

        Returns:
            BacktestResult: The immutable result of the run.
        """
        self.check(parameters)

        trades, equity_points = simulate_crossover(
            self._data,
            self._sma(parameters.short_window),
            self._sma(parameters.long_window),
            long_window=parameters.long_window,
            initial_capital=self._initial_equity,
            trend_entry=self._trend_entry,
        )

        equity = pd.Series([p.equity for p in equity_points], dtype=float)
        total_return = calculate_total_return(equity, self._initial_equity)
        benchmark_return = calculate_benchmark_return(self._data["close"], parameters.long_window)

        result = BacktestResult(
            parameters=parameters,
            initial_capital=self._initial_equity,
            final_equity=float(equity.iloc[-1]),
            total_return_pct=total_return,
            annualized_return_pct=calculate_annualized_return(equity, self._initial_equity),
            max_drawdown_pct=calculate_max_drawdown(equity, self._initial_equity),
            sharpe_ratio=calculate_sharpe_ratio(equity_returns(equity)),
            trades=tuple(trades),
            equity_curve=tuple(equity_points),
            benchmark_return_pct=benchmark_return,
            outperformance_pct=total_return - benchmark_return,
            **calculate_trade_stats(trades),
        )
        logger.debug(
            "Backtest %s: return=%.2f%% sharpe=%.3f trades=%d",
            parameters, result.total_return_pct, result.sharpe_ratio, result.total_trades,
        )
        return result


def run_backtest(
    series: PriceSeries,
    parameters: StrategyParameters,
    initial_capital: float = 100000.0,
    trend_entry: bool = False,
) -> BacktestResult:
    """
    Backtests a single parameter pair on a price series.

    Args:
        series (PriceSeries): A list of PriceBar or an OHLCV DataFrame.
        parameters (StrategyParameters): The window pair to evaluate.
        initial_capital (float): Starting cash.
        trend_entry (bool): Enter an uptrend that is already established
            when evaluation begins.

    Returns:
        BacktestResult: The result of the run.

    Raises:
        InvalidParameterError: If ``short_window >= long_window``.
        InsufficientDataError: If the series is too short for ``long_window``.
    """
    backtester = CrossoverBacktester(series, initial_equity=initial_capital, trend_entry=trend_entry)
    return backtester.run(parameters)
