"""
Exceptions raised by the backtest and optimization engine.

All of them stem from invalid input and derive from ``ValueError``, so callers
that already guard against bad input with ``except ValueError`` keep working.
"""
from typing import Sequence

from macross.strategy import StrategyParameters


class BacktestError(ValueError):
    """Base class for all engine errors."""


class InvalidParameterError(BacktestError):
    """
    Raised when a single-run backtest receives a short window that is not
    strictly smaller than the long window.
    """

    def __init__(self, parameters: StrategyParameters):
        self.parameters = parameters
        super().__init__(
            f"short_window ({parameters.short_window}) must be smaller than "
            f"long_window ({parameters.long_window})."
        )


class InsufficientDataError(BacktestError):
    """Raised when the price series is too short to evaluate a long window."""

    def __init__(self, series_length: int, long_window: int):
        self.series_length = series_length
        self.long_window = long_window
        super().__init__(
            f"Series has {series_length} bars but long_window={long_window} "
            f"needs at least {long_window + 1}."
        )


class EmptySearchSpaceError(BacktestError):
    """Raised when the candidate windows yield no pair that can be evaluated."""

    def __init__(self, short_windows: Sequence[int], long_windows: Sequence[int], reason: str):
        self.short_windows = list(short_windows)
        self.long_windows = list(long_windows)
        super().__init__(
            f"No parameter pair can be evaluated for short={self.short_windows}, "
            f"long={self.long_windows}: {reason}"
        )
