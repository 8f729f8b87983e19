#!/usr/bin/env python3
"""
CLI tool for load-testing the order pipeline in-process.

Submits a batch of orders through OrderService, waits for the worker pool to
drain and prints counters, pool statistics and processing latency
percentiles. Runs against the in-memory backends; no HTTP server or Redis
is needed.

Usage:
    python scripts/simulate_orders.py
    python scripts/simulate_orders.py --orders 500 --core 8 --max 16 --queue 100
    python scripts/simulate_orders.py --min-delay-ms 0 --max-delay-ms 50 --failure-probability 0.3
    python scripts/simulate_orders.py --orders 200 --format json --seed 42

Output:
    - Text or JSON summary with counters (received, success, failed,
      rejected, faulted), peak concurrency and duration percentiles
"""

import argparse
import json
import logging
import random
import sys
import time
from dataclasses import asdict
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.application.config import AppSettings, ProcessingConfig, WorkerPoolConfig
from src.application.models import COUNTER_NAMES, ORDER_PROCESSING_DURATION
from src.application.wiring import build_components

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Simulate order traffic against the in-process pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 100 orders with default pool and delays (0.5-2s, 10% failures)
  python scripts/simulate_orders.py

  # Overload a small pool to see rejections
  python scripts/simulate_orders.py --orders 200 --core 1 --max 2 --queue 5

  # Fast run with a fixed seed, JSON output
  python scripts/simulate_orders.py --max-delay-ms 20 --seed 7 --format json
        """,
    )

    parser.add_argument("--orders", type=int, default=100, help="Orders to submit (default: 100)")
    parser.add_argument("--core", type=int, default=4, help="Core worker count (default: 4)")
    parser.add_argument("--max", type=int, default=10, help="Max worker count (default: 10)")
    parser.add_argument("--queue", type=int, default=50, help="Backlog capacity (default: 50)")

    parser.add_argument(
        "--min-delay-ms",
        type=float,
        default=500,
        help="Minimum simulated processing delay in ms (default: 500)",
    )
    parser.add_argument(
        "--max-delay-ms",
        type=float,
        default=2000,
        help="Maximum simulated processing delay in ms (default: 2000)",
    )
    parser.add_argument(
        "--failure-probability",
        type=float,
        default=0.1,
        help="Probability an order ends FAILED (default: 0.1)",
    )
    parser.add_argument(
        "--interval-ms",
        type=float,
        default=0.0,
        help="Pause between submissions in ms (default: 0)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument(
        "--timeout",
        type=float,
        default=300.0,
        help="Seconds to wait for the pool to drain (default: 300)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    return parser.parse_args()


def format_text(report: dict) -> str:
    counters = report["counters"]
    pool = report["pool"]
    duration = report["duration"]

    lines = [
        "=" * 60,
        f"Orders submitted: {report['orders']}  (wall time {report['elapsed_seconds']:.2f}s)",
        "-" * 60,
    ]
    lines += [f"  {name:<22} {value:>8}" for name, value in counters.items()]
    lines += [
        "-" * 60,
        f"  peak concurrency       {pool['peak_active']:>8}  (max {pool['max_workers']})",
        f"  jobs completed         {pool['completed']:>8}",
        "-" * 60,
        f"  duration count         {duration['count']:>8}",
        f"  duration mean          {duration['mean']:>8.3f}s",
        f"  duration p50           {duration['p50']:>8.3f}s",
        f"  duration p95           {duration['p95']:>8.3f}s",
        f"  duration p99           {duration['p99']:>8.3f}s",
        f"  duration max           {duration['max']:>8.3f}s",
        "=" * 60,
    ]
    return "\n".join(lines)


def main():
    """Main execution function."""
    args = parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        settings = AppSettings(
            worker_pool=WorkerPoolConfig(
                core_concurrency=args.core,
                max_concurrency=args.max,
                queue_capacity=args.queue,
            ),
            processing=ProcessingConfig.from_millis(
                args.min_delay_ms, args.max_delay_ms, args.failure_probability
            ),
            store_backend="memory",
            metrics_backend="memory",
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    rng = random.Random(args.seed)
    components = build_components(settings, rng=rng)
    components.dispatcher.start()

    started = time.perf_counter()
    try:
        for i in range(args.orders):
            components.service.submit(f"item-{i + 1}", round(rng.uniform(1, 500), 2))
            if args.interval_ms:
                time.sleep(args.interval_ms / 1000)

        if not components.dispatcher.wait_idle(timeout=args.timeout):
            logger.error(f"Pool did not drain within {args.timeout}s")
    finally:
        components.dispatcher.stop(wait=True, cancel_running=True, timeout=5.0)

    elapsed = time.perf_counter() - started
    metrics = components.metrics
    report = {
        "orders": args.orders,
        "elapsed_seconds": elapsed,
        "counters": {name: metrics.read_counter(name) for name in COUNTER_NAMES},
        "pool": components.dispatcher.snapshot().to_dict(),
        "duration": asdict(metrics.summarize(ORDER_PROCESSING_DURATION)),
    }

    if args.format == "json":
        print(json.dumps(report, indent=2))
    else:
        print(format_text(report))


if __name__ == "__main__":
    main()
