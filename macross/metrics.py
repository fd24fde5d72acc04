"""
Functions for calculating performance metrics of a backtest.

The calculations reduce an equity curve and a trade log to summary
statistics. Registered objectives map a finished ``BacktestResult`` to the
single number the optimizer ranks by.
"""
from typing import TYPE_CHECKING, Callable, Dict, Sequence

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from macross.backtester.results import BacktestResult, Trade

TRADING_DAYS_PER_YEAR = 252

# Registry for objective functions
OBJECTIVE_REGISTRY: Dict[str, Callable[["BacktestResult"], float]] = {}


def register_objective(name: str, func: Callable[["BacktestResult"], float]):
    """
    Registers a new objective function for use by the optimizer.

    Args:
        name (str): The name of the objective function.
        func (Callable[[BacktestResult], float]): The function to be
            registered. Higher values rank better.
    """
    if name in OBJECTIVE_REGISTRY:
        raise ValueError(f"Objective '{name}' is already registered.")
    OBJECTIVE_REGISTRY[name] = func


def get_objective(name: str) -> Callable[["BacktestResult"], float]:
    """
    Retrieves an objective function from the registry.

    Args:
        name (str): The name of the objective function to retrieve.

    Returns:
        Callable[[BacktestResult], float]: The requested objective function.
    """
    if name not in OBJECTIVE_REGISTRY:
        raise ValueError(f"Objective '{name}' is not registered. Available: {list(OBJECTIVE_REGISTRY.keys())}")
    return OBJECTIVE_REGISTRY[name]


def equity_returns(equity_curve: pd.Series) -> pd.Series:
    """
    Per-bar simple returns of an equity curve. The first point has no prior
    value and is dropped.
    """
    return equity_curve.pct_change().iloc[1:]


def calculate_sharpe_ratio(
    returns: pd.Series,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """
    Calculates the annualized Sharpe ratio from a series of periodic returns.

    The standard deviation is the population one (``ddof=0``).

    Args:
        returns (pd.Series): A Series of periodic returns (e.g., daily).
        periods_per_year (int): The number of trading periods in a year.

    Returns:
        float: The calculated annualized Sharpe ratio. Returns 0.0 if there
        are no returns or their standard deviation is zero.
    """
    if returns.empty:
        return 0.0

    std_dev = returns.std(ddof=0)
    if std_dev == 0 or np.isnan(std_dev):
        return 0.0

    annualized_sharpe = returns.mean() / std_dev * np.sqrt(periods_per_year)
    return float(annualized_sharpe)


def calculate_total_return(equity_curve: pd.Series, initial_capital: float) -> float:
    """
    Percentage change from the initial capital to the last equity value.
    An empty curve means the capital was never touched.
    """
    if equity_curve.empty:
        return 0.0
    return float((equity_curve.iloc[-1] - initial_capital) / initial_capital * 100)


def calculate_annualized_return(
    equity_curve: pd.Series,
    initial_capital: float,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """
    Calculates the compound annual growth rate of an equity curve.

    Args:
        equity_curve (pd.Series): The account value at every evaluated bar.
        initial_capital (float): The starting cash.
        periods_per_year (int): The number of trading periods in a year.

    Returns:
        float: ``((final / initial) ** (periods_per_year / n) - 1) * 100``
        where ``n`` is the number of evaluated bars. Returns 0.0 for an empty
        curve.
    """
    trading_days = len(equity_curve)
    if trading_days == 0:
        return 0.0

    growth = equity_curve.iloc[-1] / initial_capital
    return float((growth ** (periods_per_year / trading_days) - 1) * 100)


def calculate_max_drawdown(equity_curve: pd.Series, initial_capital: float) -> float:
    """
    Calculates the largest percentage decline from a running equity peak.

    The running peak starts at the initial capital, so a strategy that only
    loses money still reports its drawdown from the starting point.

    Args:
        equity_curve (pd.Series): The account value at every evaluated bar.
        initial_capital (float): The starting cash.

    Returns:
        float: The maximum drawdown in percent, between 0 and 100.
    """
    if equity_curve.empty:
        return 0.0

    peak = equity_curve.cummax().clip(lower=initial_capital)
    drawdown = (peak - equity_curve) / peak * 100
    return float(max(drawdown.max(), 0.0))


def calculate_trade_stats(trades: Sequence["Trade"]) -> Dict[str, float]:
    """
    Counts winning and losing trades.

    Trades with exactly zero profit count toward neither side.

    Args:
        trades (Sequence[Trade]): The closed trades.

    Returns:
        Dict[str, float]: ``total_trades``, ``winning_trades``,
        ``losing_trades`` and ``win_rate_pct`` (0 with no trades).
    """
    total = len(trades)
    winning = sum(1 for t in trades if t.profit > 0)
    losing = sum(1 for t in trades if t.profit < 0)
    win_rate = winning / total * 100 if total else 0.0
    return {
        "total_trades": total,
        "winning_trades": winning,
        "losing_trades": losing,
        "win_rate_pct": float(win_rate),
    }


def calculate_benchmark_return(closes: pd.Series, start_index: int) -> float:
    """
    Buy-and-hold return of the underlying from ``closes[start_index]`` to the
    last close, in percent.
    """
    start_price = closes.iloc[start_index]
    end_price = closes.iloc[-1]
    return float((end_price - start_price) / start_price * 100)


# Register the default objective functions
register_objective("sharpe_ratio", lambda result: result.sharpe_ratio)
register_objective("total_return", lambda result: result.total_return_pct)
register_objective("annualized_return", lambda result: result.annualized_return_pct)
register_objective("outperformance", lambda result: result.outperformance_pct)
