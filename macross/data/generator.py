"""
Synthetic daily price series.

The generator stands in for a market data feed. All randomness is drawn from
an injectable ``numpy.random.Generator`` so that a seed (or a caller-owned
generator) reproduces the exact same series.
"""
import logging
from typing import List, Optional

import numpy as np
import pandas as pd

from macross.config import GeneratorConfig
from macross.data.models import PriceBar

logger = logging.getLogger(__name__)

MIN_VOLUME = 500_000
MAX_VOLUME = 1_500_000


def generate_series(
    config: Optional[GeneratorConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[PriceBar]:
    """
    Generates a random-walk OHLCV series over business days.

    Each close is the previous close moved by a daily return drawn uniformly
    from ``[(bias - 0.5) * range, (bias + 0.5) * range)``. The bar opens at the
    previous close; high and low extend beyond the open/close body by up to
    twice the absolute daily move.

    Args:
        config (Optional[GeneratorConfig]): Window, starting price and return
            distribution. Defaults to ``GeneratorConfig()``.
        rng (Optional[np.random.Generator]): The random source. When omitted,
            one is created from ``config.seed``.

    Returns:
        List[PriceBar]: One bar per business day in the configured window.
    """
    config = config or GeneratorConfig()
    if rng is None:
        rng = np.random.default_rng(config.seed)

    days = pd.bdate_range(config.start_date, config.end_date)
    bars: List[PriceBar] = []
    price = config.initial_price

    for day in days:
        daily_return = (rng.random() - 0.5 + config.upward_bias) * config.daily_range
        open_ = price
        close = open_ * (1 + daily_return)

        spread = abs(close - open_) * 2
        high = max(open_, close) + spread * rng.random()
        low = min(open_, close) - spread * rng.random()

        bars.append(PriceBar(
            date=day.date(),
            open=round(open_, 2),
            high=round(high, 2),
            low=round(low, 2),
            close=round(close, 2),
            volume=int(rng.integers(MIN_VOLUME, MAX_VOLUME)),
        ))
        price = close

    logger.debug("Generated %d bars from %s to %s", len(bars), config.start_date, config.end_date)
    return bars
