"""Tests for the benchmark helpers and a small end-to-end benchmark run"""

import logging
import os
import unittest
from unittest import mock

from benchmarks.benchmark_utils import BenchmarkUtils
from benchmarks.config import BenchmarkConfig, BenchmarkMetadata
from benchmarks.run_benchmarks import main, parse_args
from benchmarks.runner import BenchmarkRunner


def small_config(**overrides) -> BenchmarkConfig:
    config = BenchmarkConfig(merkle_size=50, mmr_size=37, smt_size=20, n_proofs=10, log_level="WARNING")
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


class TestBenchmarkUtils(unittest.TestCase):

    def test_generate_items(self):
        self.assertEqual(BenchmarkUtils.generate_items(3), [b"0", b"1", b"2"])
        self.assertEqual(BenchmarkUtils.absent_item(b"7"), b"a7")

    def test_choose_proof_indices_deterministic(self):
        first = BenchmarkUtils.choose_proof_indices(1000, 25, seed=3)
        self.assertEqual(first, BenchmarkUtils.choose_proof_indices(1000, 25, seed=3))
        self.assertEqual(len(set(first)), 25)
        self.assertEqual(first, sorted(first))
        self.assertTrue(all(0 <= i < 1000 for i in first))

    def test_choose_proof_indices_capped_at_size(self):
        self.assertEqual(BenchmarkUtils.choose_proof_indices(5, 100, seed=1), [0, 1, 2, 3, 4])

    def test_summarize_timings(self):
        s = BenchmarkUtils.summarize_timings([1.0, 2.0, 3.0, 4.0])
        self.assertEqual(s["count"], 4)
        self.assertAlmostEqual(s["mean"], 2.5)
        self.assertAlmostEqual(s["median"], 2.5)
        self.assertAlmostEqual(s["p95"], 3.85)
        self.assertEqual((s["min"], s["max"]), (1.0, 4.0))
        self.assertEqual(BenchmarkUtils.summarize_timings([])["count"], 0)

    def test_check_logging_level(self):
        merkle_logger = logging.getLogger("merkle_trees")
        previous = merkle_logger.level
        try:
            merkle_logger.setLevel(logging.DEBUG)
            with self.assertRaises(ValueError):
                BenchmarkUtils.check_logging_level()
            merkle_logger.setLevel(logging.INFO)
            BenchmarkUtils.check_logging_level()
        finally:
            merkle_logger.setLevel(previous)


class TestBenchmarkConfig(unittest.TestCase):

    def test_from_env(self):
        env = {
            "BENCHMARK_SEED": "7",
            "BENCHMARK_N_PROOFS": "12",
            "BENCHMARK_VERIFY_ONLY": "true",
            "BENCHMARK_LOG_LEVEL": "WARNING",
        }
        with mock.patch.dict(os.environ, env):
            config = BenchmarkConfig.from_env()
        self.assertEqual(config.seed, 7)
        self.assertEqual(config.n_proofs, 12)
        self.assertTrue(config.verify_only)
        self.assertEqual(config.log_level, "WARNING")

    def test_size_for(self):
        config = BenchmarkConfig()
        self.assertEqual(config.size_for("merkle"), 1_000_000)
        self.assertEqual(config.size_for("mmr"), 1_000_000)
        self.assertEqual(config.size_for("smt"), 50_000)

    def test_metadata_str(self):
        meta = BenchmarkMetadata(None, BenchmarkConfig(), "smt", 20, 10)
        text = str(meta)
        self.assertIn("Commit: unknown", text)
        self.assertIn("Structure: smt", text)
        self.assertIn("Size (n): 20", text)

    def test_parse_args(self):
        args = parse_args(["--structures", "smt", "mmr", "--smt-size", "5", "--verify-only"])
        self.assertEqual(args.structures, ["smt", "mmr"])
        self.assertEqual(args.smt_size, 5)
        self.assertTrue(args.verify_only)


class TestBenchmarkRunner(unittest.TestCase):

    def test_all_structures_verify(self):
        runner = BenchmarkRunner(small_config())
        for structure in ("merkle", "mmr", "smt"):
            with self.subTest(structure=structure):
                result = runner.run_benchmark(structure)
                self.assertEqual(result.failures, 0)
                self.assertEqual(len(result.prove_times), 10)
                self.assertEqual(len(result.verify_times), 10)
                self.assertEqual(len(result.non_inclusion_times), 10 if structure == "smt" else 0)
                summaries = runner.report(result)
                self.assertEqual(summaries["prove"]["count"], 10)
                self.assertEqual("non-inclusion" in summaries, structure == "smt")

    def test_verify_only_mode(self):
        runner = BenchmarkRunner(small_config(verify_only=True))
        for structure in ("merkle", "mmr", "smt"):
            with self.subTest(structure=structure):
                result = runner.run_benchmark(structure)
                self.assertEqual(result.failures, 0)
                self.assertEqual(result.prove_times, [])

    def test_unknown_structure(self):
        with self.assertRaises(KeyError):
            BenchmarkRunner(small_config()).run_benchmark("btree")

    def test_main_exit_code(self):
        argv = [
            "--merkle-size", "16", "--mmr-size", "11", "--smt-size", "8",
            "--proofs", "4", "--log-level", "WARNING",
        ]
        self.assertEqual(main(argv), 0)


if __name__ == "__main__":
    unittest.main()
