"""
Configuration models for the macross engine.

This module defines the Pydantic models for validating and managing the
engine's configuration, which is typically loaded from a YAML file. Every
section has defaults, so an empty file describes the stock optimization run:
a seeded synthetic series searched over the default window grid.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_SHORT_WINDOWS: List[int] = [5, 10, 15, 20, 25, 30]
DEFAULT_LONG_WINDOWS: List[int] = [30, 40, 50, 60, 70, 80, 100]


class DataConfig(BaseModel):
    """
    Configuration for the price data source.

    Args:
        path (Optional[str]): The file path to a CSV or Parquet OHLCV dataset.
            When omitted, a synthetic series is generated instead.
    """
    path: Optional[str] = Field(None, description="Path to the dataset file.")


class GeneratorConfig(BaseModel):
    """
    Configuration for the synthetic series generator.

    Args:
        start_date (date): First calendar day of the generated window.
        end_date (date): Last calendar day of the generated window.
        initial_price (float): The price the series starts from.
        upward_bias (float): Shift applied to the uniform draw, as a fraction
            of the daily range. Positive values tilt returns upwards.
        daily_range (float): Width of the daily return interval.
        seed (Optional[int]): Seed for the random source. ``None`` means an
            unseeded, non-reproducible series.
    """
    start_date: date = Field(date(2020, 1, 1), description="First calendar day.")
    end_date: date = Field(date(2024, 1, 1), description="Last calendar day.")
    initial_price: float = Field(10000.0, gt=0, description="Starting price.")
    upward_bias: float = Field(0.02, ge=-0.5, le=0.5, description="Upward drift of daily returns.")
    daily_range: float = Field(0.04, gt=0, lt=1, description="Width of the daily return interval.")
    seed: Optional[int] = Field(None, description="Seed for the random source.")

    @model_validator(mode="after")
    def _check_window(self) -> "GeneratorConfig":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date.")
        return self


class BacktestConfig(BaseModel):
    """
    Configuration for a single backtest run.

    Args:
        initial_capital (float): Starting cash of the simulated account.
        trend_entry (bool): Open a position on the first evaluated bar when
            the short average is already above the long one.
    """
    initial_capital: float = Field(100000.0, gt=0, description="Starting cash.")
    trend_entry: bool = Field(False, description="Enter an already established uptrend.")


class SearchConfig(BaseModel):
    """
    Configuration for the parameter grid search.

    Args:
        short_windows (List[int]): Candidate short moving-average windows.
        long_windows (List[int]): Candidate long moving-average windows.
        objective (str): Name of the registered objective used for ranking.
        max_workers (Optional[int]): Number of worker processes. ``None`` or 1
            evaluates the grid sequentially.
    """
    short_windows: List[int] = Field(default_factory=lambda: list(DEFAULT_SHORT_WINDOWS))
    long_windows: List[int] = Field(default_factory=lambda: list(DEFAULT_LONG_WINDOWS))
    objective: str = Field("sharpe_ratio", description="Ranking objective.")
    max_workers: Optional[int] = Field(None, gt=0, description="Worker processes.")

    @field_validator("short_windows", "long_windows")
    @classmethod
    def _check_windows(cls, windows: List[int]) -> List[int]:
        if not windows:
            raise ValueError("At least one candidate window is required.")
        if any(w <= 0 for w in windows):
            raise ValueError(f"Windows must be positive integers, got {windows}.")
        return windows


class Config(BaseModel):
    """
    Top-level configuration object for a macross run.

    Args:
        data (DataConfig): Data source configuration.
        generator (GeneratorConfig): Synthetic series configuration.
        backtest (BacktestConfig): Single-run configuration.
        search (SearchConfig): Grid search configuration.
    """
    data: DataConfig = Field(default_factory=DataConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    backtest: BacktestConfig = Field(default_factory=BacktestConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
