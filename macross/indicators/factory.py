"""
A factory for creating financial indicators.

This module provides simple, consistent wrappers for calculating the
technical indicators used by the crossover strategy.
"""
import pandas as pd


def sma(
    close: pd.Series,
    length: int = 20,
    **kwargs,
) -> pd.Series:
    """
    Calculates the Simple Moving Average (SMA).

    The value at position ``i`` is the mean of ``close[i - length + 1 .. i]``.
    The first ``length - 1`` positions (or all of them, if the input is
    shorter than ``length``) are NaN, which marks them as undefined. A value
    never depends on prices after its own position.

    Args:
        close (pd.Series): A Series of closing prices.
        length (int): The time period.

    Returns:
        pd.Series: A Series of the same length and index as ``close``.

    Raises:
        ValueError: If ``length`` is not a positive integer.
    """
    if length < 1:
        raise ValueError(f"SMA length must be positive, got {length}.")
    return close.astype(float).rolling(window=length, min_periods=length).mean()
