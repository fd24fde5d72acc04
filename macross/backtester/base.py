"""
Abstract base class for backtesting engines.
"""
from abc import ABC, abstractmethod

from macross.backtester.results import BacktestResult
from macross.data.models import PriceSeries, to_frame
from macross.strategy import StrategyParameters


class BaseBacktester(ABC):
    """
    Abstract base class for all backtesting engines.

    It defines the common interface for running a backtest of one parameter
    pair against a given price series.
    """

    def __init__(self, data: PriceSeries, initial_equity: float = 100000.0):
        """
        Initializes the backtester.

        Args:
            data (PriceSeries): The OHLCV bars, as a list of PriceBar or a
                DataFrame. The series is validated once, here.
            initial_equity (float): The starting equity for the portfolio.
        """
        if initial_equity <= 0:
            raise ValueError(f"initial_equity must be positive, got {initial_equity}.")
        self._data = to_frame(data)
        self._initial_equity = initial_equity

    @property
    def data(self):
        return self._data

    @abstractmethod
    def run(self, parameters: StrategyParameters) -> BacktestResult:
        """
        Runs a backtest for the given strategy parameters.

        Args:
            parameters (StrategyParameters): The strategy to be backtested.

        Returns:
            BacktestResult: An object containing the results of the backtest.
        """
        raise NotImplementedError
