#!/usr/bin/env python3
"""
Main entry point for Merkle structure benchmarks.

Builds each structure from sequential integers rendered as strings and
times proof generation and verification for a sample of the items.

Usage:
    # Run with default settings
    python -m benchmarks.run_benchmarks

    # Only the sparse Merkle tree, with a smaller input
    python -m benchmarks.run_benchmarks --structures smt --smt-size 5000

    # Run in verify-only mode (no timing, only correctness)
    BENCHMARK_VERIFY_ONLY=true python -m benchmarks.run_benchmarks

    # Run with custom log level
    BENCHMARK_LOG_LEVEL=DEBUG python -m benchmarks.run_benchmarks
"""

import argparse
import logging
import sys
import time

from merkle_trees.logging_config import setup_logging as setup_library_logging

from .config import STRUCTURES, BenchmarkConfig
from .runner import BenchmarkRunner


def setup_logging(config: BenchmarkConfig) -> None:
    """Configure logging for benchmark output."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler()],
        force=True,
    )
    setup_library_logging(level=level)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Run Merkle structure benchmarks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for choosing proof targets (default: from env or 42)",
    )
    parser.add_argument(
        "--structures",
        nargs="+",
        choices=STRUCTURES,
        help="Structures to benchmark (default: all)",
    )
    parser.add_argument("--merkle-size", type=int, help="Items in the Merkle tree (default: 1000000)")
    parser.add_argument("--mmr-size", type=int, help="Items in the mountain range (default: 1000000)")
    parser.add_argument("--smt-size", type=int, help="Items in the sparse Merkle tree (default: 50000)")
    parser.add_argument(
        "--proofs",
        type=int,
        help="Number of proofs per structure (default: 100)",
    )
    parser.add_argument(
        "--verify-only",
        action="store_true",
        help="Run in verify-only mode (no timing)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main benchmark execution.

    Returns:
        Exit code (0 for success, 1 if any proof or invariant check failed)
    """
    args = parse_args(argv)

    # Start with config from environment
    config = BenchmarkConfig.from_env()

    # Override with command-line arguments
    if args.seed is not None:
        config.seed = args.seed
    if args.structures is not None:
        config.structures = tuple(args.structures)
    if args.merkle_size is not None:
        config.merkle_size = args.merkle_size
    if args.mmr_size is not None:
        config.mmr_size = args.mmr_size
    if args.smt_size is not None:
        config.smt_size = args.smt_size
    if args.proofs is not None:
        config.n_proofs = args.proofs
    if args.verify_only:
        config.verify_only = True
    if args.log_level is not None:
        config.log_level = args.log_level

    setup_logging(config)

    logging.info("=" * 70)
    logging.info("MERKLE STRUCTURE BENCHMARKS")
    logging.info("=" * 70)
    if config.verify_only:
        logging.info("Mode: VERIFY-ONLY (correctness checks, no timing)")
    else:
        logging.info("Mode: PERFORMANCE (timed measurements)")

    runner = BenchmarkRunner(config)
    failures = 0
    overall_start = time.perf_counter()

    for structure in config.structures:
        logging.info("")
        logging.info("=" * 70)
        logging.info(f"BENCHMARK: {structure}, n={config.size_for(structure)}")
        logging.info("=" * 70)

        result = runner.run_benchmark(structure)
        if not config.verify_only:
            runner.report(result)
        failures += result.failures

    logging.info("")
    logging.info("=" * 70)
    logging.info(f"TOTAL EXECUTION TIME: {time.perf_counter() - overall_start:.3f} seconds")
    logging.info("=" * 70)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
