#!/usr/bin/env python3
"""Benchmark the autopilot levels against each other.

Runs N headless games per level with the same seeds and board settings, then
prints per-level averages:
- mean / best final score
- mean ticks survived
- how the games ended (wall, self, board_full, or cut off at --max-ticks)
"""

import argparse
import logging
import os
import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

# Ensure we can import the engine from the backend root
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from autopilot import AVAILABLE_LEVELS  # noqa: E402
from config import load_config  # noqa: E402
from domain.constants import OPEN  # noqa: E402
from main import run_simulation  # noqa: E402


logger = logging.getLogger(__name__)


@dataclass
class LevelSummary:
    level: str
    scores: List[int] = field(default_factory=list)
    ticks: List[int] = field(default_factory=list)
    endings: Counter = field(default_factory=Counter)

    @property
    def games(self) -> int:
        return len(self.scores)

    @property
    def mean_score(self) -> float:
        return sum(self.scores) / self.games if self.games else 0.0

    @property
    def best_score(self) -> int:
        return max(self.scores) if self.scores else 0

    @property
    def mean_ticks(self) -> float:
        return sum(self.ticks) / self.games if self.games else 0.0


def benchmark(levels: List[str], games: int, max_ticks: int, base_seed: int, **overrides) -> Dict[str, LevelSummary]:
    summaries: Dict[str, LevelSummary] = {}
    for level in levels:
        summary = LevelSummary(level=level)
        config = load_config(autopilot_level=level, **overrides)
        for i in range(games):
            result = run_simulation(config, max_ticks=max_ticks, seed=base_seed + i)
            summary.scores.append(result["final_score"])
            summary.ticks.append(result["ticks"])
            summary.endings[result["death_reason"] or "cut_off"] += 1
        summaries[level] = summary
        logger.info("Finished %d games for level %s", games, level)
    return summaries


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare autopilot levels over headless games.")
    parser.add_argument("--levels", nargs="+", choices=AVAILABLE_LEVELS, default=AVAILABLE_LEVELS)
    parser.add_argument("--games", type=int, default=20, help="Games per level")
    parser.add_argument("--max-ticks", type=int, default=2000, help="Tick limit per game")
    parser.add_argument("--seed", type=int, default=0, help="Seed of the first game")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--open", action="store_true", help="Wrap-around board (no walls)")
    parser.add_argument("--no-power-ups", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    # Per-game start/stop lines drown the report
    logging.getLogger("main").setLevel(logging.WARNING)

    overrides = {}
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    if args.open:
        overrides["boundary_mode"] = OPEN
    if args.no_power_ups:
        overrides["power_ups_enabled"] = False

    summaries = benchmark(args.levels, args.games, args.max_ticks, args.seed, **overrides)

    logger.info("")
    logger.info("=== Autopilot benchmark (%d games per level) ===", args.games)
    for summary in summaries.values():
        endings = ", ".join(f"{reason}={count}" for reason, count in summary.endings.most_common())
        logger.info(
            "%-7s mean_score=%.2f best=%d mean_ticks=%.1f  endings: %s",
            summary.level,
            summary.mean_score,
            summary.best_score,
            summary.mean_ticks,
            endings,
        )


if __name__ == "__main__":
    main()
