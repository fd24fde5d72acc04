"""
Core data structure describing a moving-average crossover strategy.
"""
from pydantic import BaseModel, ConfigDict, Field


class StrategyParameters(BaseModel):
    """
    The window lengths of a moving-average crossover strategy.

    Ordering is deliberately not validated here: the optimizer filters out
    pairs with ``short_window >= long_window`` and a single backtest rejects
    them with ``InvalidParameterError``.

    Args:
        short_window (int): Length of the fast moving average.
        long_window (int): Length of the slow moving average.
    """
    model_config = ConfigDict(frozen=True)

    short_window: int = Field(..., gt=0, description="Length of the fast moving average.")
    long_window: int = Field(..., gt=0, description="Length of the slow moving average.")

    @property
    def is_ordered(self) -> bool:
        """True when the short window is strictly smaller than the long one."""
        return self.short_window < self.long_window

    def __str__(self) -> str:
        return f"{self.short_window}/{self.long_window}"
