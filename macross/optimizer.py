"""
Grid search over moving-average window pairs.
"""
import logging
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import List, Optional, Sequence

import pandas as pd

from macross.backtester.crossover import CrossoverBacktester
from macross.backtester.results import BacktestResult
from macross.config import DEFAULT_LONG_WINDOWS, DEFAULT_SHORT_WINDOWS, Config
from macross.data.models import PriceSeries, to_frame
from macross.errors import EmptySearchSpaceError, InsufficientDataError
from macross.metrics import get_objective
from macross.results import OptimizationResult
from macross.strategy import StrategyParameters

logger = logging.getLogger(__name__)


def parameter_grid(short_windows: Sequence[int], long_windows: Sequence[int]) -> List[StrategyParameters]:
    """
    Enumerates every ``(short, long)`` pair with ``short < long``, short
    windows in the outer loop and long windows in the inner one.
    """
    return [
        StrategyParameters(short_window=short, long_window=long)
        for short in short_windows
        for long in long_windows
        if short < long
    ]


def _run_pair(
    data: pd.DataFrame,
    initial_capital: float,
    trend_entry: bool,
    parameters: StrategyParameters,
) -> BacktestResult:
    """Runs one pair in a worker process."""
    backtester = CrossoverBacktester(data, initial_equity=initial_capital, trend_entry=trend_entry)
    return backtester.run(parameters)


class Optimizer:
    """
    Evaluates every valid window pair and ranks the results.
    """

    def __init__(
        self,
        data: PriceSeries,
        short_windows: Sequence[int] = DEFAULT_SHORT_WINDOWS,
        long_windows: Sequence[int] = DEFAULT_LONG_WINDOWS,
        initial_capital: float = 100000.0,
        objective: str = "sharpe_ratio",
        max_workers: Optional[int] = None,
        trend_entry: bool = False,
    ):
        """
        Initializes the Optimizer.

        Args:
            data (PriceSeries): The price series shared by all runs.
            short_windows (Sequence[int]): Candidate short windows.
            long_windows (Sequence[int]): Candidate long windows.
            initial_capital (float): Starting cash of every run.
            objective (str): Registered objective to rank by.
            max_workers (Optional[int]): Worker processes; ``None`` or 1
                runs the grid in this process.
            trend_entry (bool): Passed through to every backtest.
        """
        self.data = to_frame(data)
        self.short_windows = list(short_windows)
        self.long_windows = list(long_windows)
        self.initial_capital = initial_capital
        self.objective = objective
        self.max_workers = max_workers
        self.trend_entry = trend_entry

        self._score = get_objective(objective)
        self.grid: List[StrategyParameters] = parameter_grid(self.short_windows, self.long_windows)

    @classmethod
    def from_config(cls, config: Config, data: PriceSeries) -> "Optimizer":
        """Builds an optimizer from the backtest and search sections of a config."""
        return cls(
            data,
            short_windows=config.search.short_windows,
            long_windows=config.search.long_windows,
            initial_capital=config.backtest.initial_capital,
            objective=config.search.objective,
            max_workers=config.search.max_workers,
            trend_entry=config.backtest.trend_entry,
        )

    def _check_search_space(self):
        """Fails before any work if the grid cannot be fully evaluated."""
        if not self.grid:
            raise EmptySearchSpaceError(
                self.short_windows, self.long_windows,
                "every short window is greater than or equal to every long window.",
            )

        length = len(self.data)
        if all(length <= p.long_window for p in self.grid):
            raise EmptySearchSpaceError(
                self.short_windows, self.long_windows,
                f"the series has only {length} bars.",
            )

        longest = max(p.long_window for p in self.grid)
        if length <= longest:
            raise InsufficientDataError(length, longest)

    def _evaluate(self) -> List[BacktestResult]:
        """Runs every pair, returning results in grid order."""
        if self.max_workers is None or self.max_workers <= 1:
            backtester = CrossoverBacktester(
                self.data, initial_equity=self.initial_capital, trend_entry=self.trend_entry
            )
            return [backtester.run(parameters) for parameters in self.grid]

        task = partial(_run_pair, self.data, self.initial_capital, self.trend_entry)
        with ProcessPoolExecutor(max_workers=self.max_workers) as executor:
            # map yields in submission order and re-raises the first failure
            return list(executor.map(task, self.grid))

    def run(self) -> OptimizationResult:
        """
        Executes the grid search.

        Returns:
            OptimizationResult: The best pair, its result, and all results
            sorted by the objective, best first. Ties keep grid order, so the
            first pair encountered wins.

        Raises:
            EmptySearchSpaceError: If no pair can be evaluated.
            InsufficientDataError: If the series is too short for some pair.
        """
        self._check_search_space()
        logger.info(
            "Starting optimization of %d parameter pairs on %d bars (objective: %s)",
            len(self.grid), len(self.data), self.objective,
        )

        results = self._evaluate()

        best: Optional[BacktestResult] = None
        best_score = float("-inf")
        for result in results:
            score = self._score(result)
            if best is None or score > best_score:
                best, best_score = result, score

        ranked = sorted(results, key=self._score, reverse=True)
        logger.info(
            "Optimization complete. Best parameters: %s (%s=%.4f)",
            best.parameters, self.objective, best_score,
        )

        return OptimizationResult(
            best_parameters=best.parameters,
            best_result=best,
            all_results=tuple(ranked),
            objective=self.objective,
        )


def optimize(
    series: PriceSeries,
    short_range: Sequence[int] = DEFAULT_SHORT_WINDOWS,
    long_range: Sequence[int] = DEFAULT_LONG_WINDOWS,
    **kwargs,
) -> OptimizationResult:
    """
    Runs a full grid search over ``short_range x long_range``.

    Args:
        series (PriceSeries): A list of PriceBar or an OHLCV DataFrame.
        short_range (Sequence[int]): Candidate short windows.
        long_range (Sequence[int]): Candidate long windows.
        **kwargs: Further ``Optimizer`` options (``initial_capital``,
            ``objective``, ``max_workers``, ``trend_entry``).

    Returns:
        OptimizationResult: The aggregated search result.
    """
    return Optimizer(series, short_windows=short_range, long_windows=long_range, **kwargs).run()
