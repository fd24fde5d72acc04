"""
The OptimizationResult object for storing and reporting grid searches.
"""
import os
from typing import List, Tuple

import matplotlib.pyplot as plt
import pandas as pd
from pydantic import BaseModel, ConfigDict

from macross.backtester.results import BacktestResult
from macross.strategy import StrategyParameters

RANKING_COLUMNS = [
    "rank",
    "short_window",
    "long_window",
    "total_return_pct",
    "annualized_return_pct",
    "sharpe_ratio",
    "max_drawdown_pct",
    "win_rate_pct",
    "total_trades",
    "benchmark_return_pct",
    "outperformance_pct",
]


class OptimizationResult(BaseModel):
    """
    Represents the final results of a grid search.

    Args:
        best_parameters (StrategyParameters): The winning window pair.
        best_result (BacktestResult): The winning pair's backtest.
        all_results (Tuple[BacktestResult, ...]): Every evaluated pair,
            sorted by the objective, best first.
        objective (str): The name of the ranking objective.
    """
    model_config = ConfigDict(frozen=True)

    best_parameters: StrategyParameters
    best_result: BacktestResult
    all_results: Tuple[BacktestResult, ...]
    objective: str = "sharpe_ratio"

    def top(self, n: int = 10) -> List[BacktestResult]:
        """Returns the ``n`` best results."""
        return list(self.all_results[:n])

    def to_frame(self) -> pd.DataFrame:
        """Returns one summary row per evaluated pair, in rank order."""
        rows = []
        for rank, result in enumerate(self.all_results, start=1):
            rows.append({
                "rank": rank,
                "short_window": result.parameters.short_window,
                "long_window": result.parameters.long_window,
                "total_return_pct": result.total_return_pct,
                "annualized_return_pct": result.annualized_return_pct,
                "sharpe_ratio": result.sharpe_ratio,
                "max_drawdown_pct": result.max_drawdown_pct,
                "win_rate_pct": result.win_rate_pct,
                "total_trades": result.total_trades,
                "benchmark_return_pct": result.benchmark_return_pct,
                "outperformance_pct": result.outperformance_pct,
            })
        return pd.DataFrame(rows, columns=RANKING_COLUMNS)

    def generate_report(self, output_dir: str, top_n: int = 10):
        """
        Generates a collection of static report files (plots, tables) in the
        specified output directory.
        """
        os.makedirs(output_dir, exist_ok=True)

        # 1. Full ranking
        self.to_frame().to_csv(os.path.join(output_dir, "ranking.csv"), index=False)

        # 2. Trade log of the best pair
        self.best_result.trades_frame().to_csv(os.path.join(output_dir, "trades.csv"), index=False)

        # 3. Equity vs. buy-and-hold
        self._plot_equity_curve(output_dir)

        # 4. Text summary
        self._write_summary(output_dir, top_n)

    def _plot_equity_curve(self, output_dir: str):
        """Plots the best strategy's equity against a buy-and-hold benchmark."""
        df = self.best_result.equity_frame()
        if df.empty:
            return

        # Scale the benchmark to the same starting capital
        benchmark = df["benchmark_price"] / df["benchmark_price"].iloc[0] * self.best_result.initial_capital

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(df.index, df["equity"], label=f"MA {self.best_parameters}")
        ax.plot(df.index, benchmark, label="Buy & Hold", linestyle='--')
        ax.set_xlabel("Date")
        ax.set_ylabel("Equity")
        ax.set_title("Equity Curve vs. Benchmark")
        ax.legend()
        ax.grid(True)

        plt.savefig(os.path.join(output_dir, "equity_curve.png"))
        plt.close(fig)

    def _write_summary(self, output_dir: str, top_n: int):
        """Writes the headline metrics and the top-N table."""
        best = self.best_result
        with open(os.path.join(output_dir, "summary.txt"), 'w') as f:
            f.write("=== Moving Average Crossover Optimization ===\n\n")
            f.write(f"Pairs evaluated:   {len(self.all_results)}\n")
            f.write(f"Ranked by:         {self.objective}\n")
            f.write(f"Best parameters:   short={self.best_parameters.short_window}, "
                    f"long={self.best_parameters.long_window}\n\n")
            f.write(f"Total Return:      {best.total_return_pct:.2f}%\n")
            f.write(f"Annualized Return: {best.annualized_return_pct:.2f}%\n")
            f.write(f"Sharpe Ratio:      {best.sharpe_ratio:.2f}\n")
            f.write(f"Max Drawdown:      {best.max_drawdown_pct:.2f}%\n")
            f.write(f"Win Rate:          {best.win_rate_pct:.2f}% "
                    f"({best.winning_trades}/{best.total_trades})\n")
            f.write(f"Benchmark Return:  {best.benchmark_return_pct:.2f}%\n")
            f.write(f"Outperformance:    {best.outperformance_pct:.2f}%\n\n")

            f.write(f"=== Top {top_n} Parameter Combinations ===\n\n")
            f.write(self.to_frame().head(top_n).to_string(index=False, float_format="%.2f"))
            f.write("\n")
