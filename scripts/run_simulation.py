"""
CLI entry point for running a multi-day café simulation.

Modes:
    (default): customers live in memory for the duration of the run
    --persist: customers are loaded from / saved to the JSON customer store
"""

import argparse
import logging
import random
import sys
from datetime import datetime
from pathlib import Path

# Ensure project root is in sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_settings
from src.analysis_layer.roast_analyzer import daily_satisfaction, summarize_events
from src.data_layer.customer_store import InMemoryCustomerStore, JsonFileCustomerStore
from src.simulation_layer.clock import ManualClock
from src.simulation_layer.engine import CafeSimulationEngine
from src.simulation_layer.learning_manager import CustomerLearningManager
from src.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Coffee Café Customer Simulation")
    parser.add_argument("--days", type=int, default=14, help="Number of simulated days (default: 14)")
    parser.add_argument("--customers", type=int, default=10, help="Number of regular customers (default: 10)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    parser.add_argument(
        "--start-date",
        type=lambda s: datetime.strptime(s, "%Y-%m-%d"),
        default=datetime(2025, 2, 3),
        help="First simulated day, YYYY-MM-DD (default: 2025-02-03)",
    )
    parser.add_argument(
        "--persist",
        action="store_true",
        help="Load/save customers in the JSON store under the data directory",
    )
    parser.add_argument("--data-dir", type=Path, default=None, help="Customer store directory override")
    parser.add_argument("--output", type=Path, default=None, help="Event log CSV path")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    parser.add_argument("--verbose", action="store_true", help="DEBUG logging")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging("DEBUG" if args.verbose else None, args.log_file)

    logger.info("=" * 60)
    logger.info("Coffee Café Customer Simulation")
    logger.info("=" * 60)

    seed = args.seed if args.seed is not None else settings.customer.rng_seed
    rng = random.Random(seed)
    clock = ManualClock(args.start_date)

    if args.persist:
        data_dir = args.data_dir or settings.paths.data_dir
        store = JsonFileCustomerStore(data_dir)
        logger.info("Customer store: %s", data_dir)
    else:
        store = InMemoryCustomerStore()

    manager = CustomerLearningManager(store=store, rng=rng, clock=clock, settings=settings.customer)
    customer_ids = [f"C{i:03d}" for i in range(1, args.customers + 1)]
    engine = CafeSimulationEngine(customer_ids, manager=manager, rng=rng, clock=clock)

    results_df = engine.run_simulation(start_date=args.start_date, num_days=args.days)

    output_path = args.output or settings.paths.output_dir / "cafe_simulation_result.csv"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    results_df.to_csv(output_path, index=False, encoding="utf-8-sig")
    logger.info("Full log -> %s", output_path)

    summary = summarize_events(results_df)
    summary_path = output_path.with_name(output_path.stem + "_customers.csv")
    summary.to_csv(summary_path, index=False, encoding="utf-8-sig")
    logger.info("Customer summary -> %s", summary_path)

    daily = daily_satisfaction(results_df)
    for _, row in daily.iterrows():
        logger.info("Day %d: mean satisfaction %.1f", row["day"], row["mean_satisfaction"])

    insights = manager.generate_player_insights()
    for section, items in insights.items():
        for item in items:
            logger.info("[%s] %s", section, item)


if __name__ == "__main__":
    main()
