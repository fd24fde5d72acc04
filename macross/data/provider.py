"""
Data provider interfaces and implementations.

This module defines the abstract interface for price series providers and
provides concrete implementations for loading daily bars from CSV and Parquet
files, or from the synthetic generator when no real data source is wired in.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np
import pandas as pd

from macross.config import Config, GeneratorConfig
from macross.data.generator import generate_series
from macross.data.models import PriceBar, frame_to_bars


class DataProvider(ABC):
    """
    Abstract base class for all data providers.

    Every provider hands out a validated list of ``PriceBar`` so that the
    backtester and optimizer never depend on where the data came from.
    """

    @abstractmethod
    def load(self) -> List[PriceBar]:
        """
        Loads the series from the source, validates it, and returns it.

        Returns:
            List[PriceBar]: Bars in strictly increasing date order.
        """
        raise NotImplementedError


class FileProvider(DataProvider):
    """
    Base class for providers reading an OHLCV table from a file.
    """

    def __init__(self, path: str):
        """
        Initializes the data provider.

        Args:
            path (str): The path to the data source file.
        """
        self._path = path

    def _to_bars(self, df: pd.DataFrame) -> List[PriceBar]:
        """
        Validates the loaded DataFrame and converts it to bars.

        Raises:
            ValueError: If validation fails (e.g., missing columns, wrong
                index type, non-increasing dates).
        """
        df = df.copy()
        df.columns = [str(col).lower() for col in df.columns]
        if "volume" in df.columns:
            df["volume"] = df["volume"].fillna(0)
        return frame_to_bars(df)


class ParquetProvider(FileProvider):
    """
    A data provider for loading a daily series from a Parquet file.
    """

    def load(self) -> List[PriceBar]:
        """
        Raises:
            FileNotFoundError: If the file at `self._path` does not exist.
        """
        df = pd.read_parquet(self._path)
        return self._to_bars(df)


class CSVProvider(FileProvider):
    """
    A data provider for loading a daily series from a CSV file.

    It assumes that the first column of the CSV is the date index in
    ``YYYY-MM-DD`` form.
    """

    def load(self) -> List[PriceBar]:
        """
        Raises:
            FileNotFoundError: If the file at `self._path` does not exist.
        """
        df = pd.read_csv(self._path, index_col=0, parse_dates=True, date_format="%Y-%m-%d")
        return self._to_bars(df)


class SyntheticProvider(DataProvider):
    """
    A data provider backed by the random-walk series generator.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None, rng: Optional[np.random.Generator] = None):
        self._config = config or GeneratorConfig()
        self._rng = rng

    def load(self) -> List[PriceBar]:
        return generate_series(self._config, rng=self._rng)


def get_provider(config: Config) -> DataProvider:
    """
    Picks the provider matching the configured data source.

    Args:
        config (Config): The run configuration.

    Returns:
        DataProvider: A Parquet or CSV provider when ``data.path`` is set,
        otherwise a synthetic provider.
    """
    path = config.data.path
    if path is None:
        return SyntheticProvider(config.generator)
    if path.endswith(".parquet"):
        return ParquetProvider(path=path)
    return CSVProvider(path=path)
