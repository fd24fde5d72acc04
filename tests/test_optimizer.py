"""
Tests for the Optimizer class and the grid search.
"""
import numpy as np
import pandas as pd
import pytest

from macross.config import Config, GeneratorConfig, SearchConfig
from macross.data.generator import generate_series
from macross.errors import EmptySearchSpaceError, InsufficientDataError
from macross.optimizer import Optimizer, optimize, parameter_grid
from macross.results import OptimizationResult
from macross.strategy import StrategyParameters


@pytest.fixture(scope="module")
def sample_bars():
    """
    Provides a reproducible synthetic series covering the default window.
    """
    return generate_series(GeneratorConfig(seed=42))


def constant_frame(n: int) -> pd.DataFrame:
    closes = np.full(n, 100.0)
    return pd.DataFrame(
        {'open': closes, 'high': closes, 'low': closes, 'close': closes, 'volume': closes},
        index=pd.bdate_range('2021-01-01', periods=n),
    )


def test_parameter_grid_skips_unordered_pairs():
    grid = parameter_grid([5, 20, 30], [20, 30])
    assert [(p.short_window, p.long_window) for p in grid] == [(5, 20), (5, 30), (20, 30)]


def test_optimize_small_grid(sample_bars):
    result = optimize(sample_bars, short_range=[5, 10], long_range=[20, 30])

    assert isinstance(result, OptimizationResult)
    assert len(result.all_results) == 4
    assert {(r.parameters.short_window, r.parameters.long_window) for r in result.all_results} == {
        (5, 20), (5, 30), (10, 20), (10, 30)
    }

    sharpes = [r.sharpe_ratio for r in result.all_results]
    assert result.best_result.sharpe_ratio == max(sharpes)
    assert sharpes == sorted(sharpes, reverse=True)
    assert result.best_parameters == result.best_result.parameters
    assert result.all_results[0] == result.best_result


def test_optimizer_default_grid(sample_bars):
    optimizer = Optimizer(sample_bars)
    result = optimizer.run()

    # 6 short x 7 long candidates, minus the 30/30 pair
    assert len(optimizer.grid) == 41
    assert len(result.all_results) == 41
    assert all(r.parameters.short_window < r.parameters.long_window for r in result.all_results)


def test_ties_keep_first_pair():
    """
    On a flat series every pair has a Sharpe ratio of 0; the first pair in
    enumeration order wins and the ranking keeps enumeration order.
    """
    result = optimize(constant_frame(80), short_range=[5, 10], long_range=[20, 30])

    assert result.best_parameters == StrategyParameters(short_window=5, long_window=20)
    assert [(r.parameters.short_window, r.parameters.long_window) for r in result.all_results] == [
        (5, 20), (5, 30), (10, 20), (10, 30)
    ]


def test_empty_search_space_raises_error(sample_bars):
    with pytest.raises(EmptySearchSpaceError) as excinfo:
        optimize(sample_bars, short_range=[30, 40], long_range=[10, 20])
    assert excinfo.value.short_windows == [30, 40]
    assert excinfo.value.long_windows == [10, 20]


def test_series_too_short_for_every_pair_raises_error():
    with pytest.raises(EmptySearchSpaceError, match="only 15 bars"):
        optimize(constant_frame(15), short_range=[5, 10], long_range=[20, 30])


def test_series_too_short_for_longest_window_aborts_search():
    with pytest.raises(InsufficientDataError) as excinfo:
        optimize(constant_frame(25), short_range=[5, 10], long_range=[20, 30])
    assert excinfo.value.series_length == 25
    assert excinfo.value.long_window == 30


def test_alternative_objective(sample_bars):
    result = optimize(sample_bars, short_range=[5, 10], long_range=[20, 30], objective="total_return")

    returns = [r.total_return_pct for r in result.all_results]
    assert result.objective == "total_return"
    assert result.best_result.total_return_pct == max(returns)
    assert returns == sorted(returns, reverse=True)


def test_unknown_objective_raises_error(sample_bars):
    with pytest.raises(ValueError, match="not registered"):
        Optimizer(sample_bars, objective="no_such_objective")


def test_parallel_matches_sequential(sample_bars):
    sequential = optimize(sample_bars, short_range=[5, 10, 15], long_range=[20, 30])
    parallel = optimize(sample_bars, short_range=[5, 10, 15], long_range=[20, 30], max_workers=2)

    pd.testing.assert_frame_equal(sequential.to_frame(), parallel.to_frame())
    assert sequential.best_result == parallel.best_result


def test_from_config(sample_bars):
    config = Config(search=SearchConfig(short_windows=[5], long_windows=[20, 40], objective="outperformance"))
    config.backtest.initial_capital = 200000.0

    result = Optimizer.from_config(config, sample_bars).run()

    assert len(result.all_results) == 2
    assert result.objective == "outperformance"
    assert all(r.initial_capital == 200000.0 for r in result.all_results)
