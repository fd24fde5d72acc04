"""
This __init__.py file exposes the public API of the macross engine.
"""

from .config import Config
from .io import load_config
from .strategy import StrategyParameters
from .errors import (
    BacktestError,
    EmptySearchSpaceError,
    InsufficientDataError,
    InvalidParameterError,
)
from .data.models import PriceBar
from .data.generator import generate_series
from .data.provider import get_provider
from .backtester.results import BacktestResult, EquityPoint, Trade
from .backtester.crossover import CrossoverBacktester, run_backtest
from .results import OptimizationResult
from .optimizer import Optimizer, optimize
from .metrics import register_objective

__all__ = [
    "Config",
    "load_config",
    "StrategyParameters",
    "BacktestError",
    "EmptySearchSpaceError",
    "InsufficientDataError",
    "InvalidParameterError",
    "PriceBar",
    "generate_series",
    "get_provider",
    "BacktestResult",
    "EquityPoint",
    "Trade",
    "CrossoverBacktester",
    "run_backtest",
    "OptimizationResult",
    "Optimizer",
    "optimize",
    "register_objective",
]
