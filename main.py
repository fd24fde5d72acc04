"""
Main entry point for running a moving-average crossover optimization.
"""
import argparse
import logging
import os
import sys

# Ensure the project root is in the python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

import macross


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Moving-average crossover backtest and optimizer")
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument("--output", default="runs/latest", help="Report output directory")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the synthetic series")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes for the grid search")
    parser.add_argument("--verbose", action="store_true", help="Log per-pair details")
    return parser.parse_args(argv)


def main(argv=None):
    """
    Main execution function.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("--- macross: Moving Average Crossover Optimization ---")

    # 1. Load configuration from file
    config = macross.load_config(args.config) if args.config else macross.Config()
    if args.seed is not None:
        config.generator.seed = args.seed
    if args.workers is not None:
        config.search.max_workers = args.workers

    # 2. Load the price series
    provider = macross.get_provider(config)
    series = provider.load()
    print(f"Loaded {len(series)} bars from {type(provider).__name__} "
          f"({series[0].date} to {series[-1].date}).")

    # 3. Create and run the optimizer
    try:
        optimizer = macross.Optimizer.from_config(config, series)
        result = optimizer.run()
    except macross.BacktestError as e:
        print(f"Optimization failed: {e}")
        return 1

    best = result.best_result
    print(f"Best parameters: {result.best_parameters} "
          f"(Sharpe {best.sharpe_ratio:.2f}, return {best.total_return_pct:.2f}%, "
          f"benchmark {best.benchmark_return_pct:.2f}%)")

    # 4. Generate the final report
    result.generate_report(output_dir=args.output)
    print(f"Report generated in '{args.output}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
