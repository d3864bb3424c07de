"""
Tests for cli/benchmark_levels.py - autopilot level comparison.
"""

import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cli.benchmark_levels import LevelSummary, benchmark


class TestLevelSummary:

    def test_empty_summary(self):
        summary = LevelSummary(level="basic")
        assert summary.games == 0
        assert summary.mean_score == 0.0
        assert summary.best_score == 0

    def test_averages(self):
        summary = LevelSummary(level="smart", scores=[2, 4], ticks=[10, 30])
        assert summary.mean_score == 3.0
        assert summary.best_score == 4
        assert summary.mean_ticks == 20.0


class TestBenchmark:

    def test_runs_each_level(self):
        summaries = benchmark(["basic", "genius"], games=2, max_ticks=20, base_seed=0, width=10, height=10)
        assert list(summaries) == ["basic", "genius"]
        for summary in summaries.values():
            assert summary.games == 2
            assert sum(summary.endings.values()) == 2
            assert all(ticks <= 20 for ticks in summary.ticks)

    def test_same_seeds_same_results(self):
        first = benchmark(["smart"], games=2, max_ticks=30, base_seed=5, width=10, height=10)
        second = benchmark(["smart"], games=2, max_ticks=30, base_seed=5, width=10, height=10)
        assert first["smart"].scores == second["smart"].scores
        assert first["smart"].ticks == second["smart"].ticks
