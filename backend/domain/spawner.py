"""
Food and power-up placement.

Cells are drawn by rejection sampling; after max_attempts misses a linear scan
picks the first free cell, so a crowded board can't spin forever.
"""

import logging
import random
from typing import Iterable, Optional, Sequence, Set, Tuple

from .board import Board
from .power_ups import PowerUpFood

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000
DEFAULT_POWER_UP_CHANCE = 0.2
DEFAULT_MAX_PER_KIND = 2


class FoodSpawner:
    def __init__(
        self,
        board: Board,
        rng: Optional[random.Random] = None,
        safe_zone_rows: int = 0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        power_up_chance: float = DEFAULT_POWER_UP_CHANCE,
        max_per_kind: int = DEFAULT_MAX_PER_KIND,
    ):
        if not 0 <= safe_zone_rows < board.height:
            raise ValueError(
                f"safe_zone_rows must be in [0, {board.height}), got {safe_zone_rows}."
            )
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.board = board
        self.rng = rng or random.Random()
        self.safe_zone_rows = safe_zone_rows
        self.max_attempts = max_attempts
        self.power_up_chance = power_up_chance
        self.max_per_kind = max_per_kind

    def random_free_cell(self, occupied: Set[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        """
        Return a random cell (x, y) not in occupied, or None if the spawn area is full.
        """
        for _ in range(self.max_attempts):
            x = self.rng.randint(0, self.board.width - 1)
            y = self.rng.randint(self.safe_zone_rows, self.board.height - 1)
            if (x, y) not in occupied:
                return (x, y)

        logger.debug("Rejection sampling missed %d times, scanning for a free cell", self.max_attempts)
        for y in range(self.safe_zone_rows, self.board.height):
            for x in range(self.board.width):
                if (x, y) not in occupied:
                    return (x, y)
        return None

    def place_food(
        self,
        snake_cells: Iterable[Tuple[int, int]],
        power_up_foods: Sequence[PowerUpFood] = (),
    ) -> Optional[Tuple[int, int]]:
        occupied = set(snake_cells)
        occupied.update(food.cell for food in power_up_foods)
        return self.random_free_cell(occupied)

    def maybe_spawn_power_up(
        self,
        snake_cells: Iterable[Tuple[int, int]],
        food: Optional[Tuple[int, int]],
        power_up_foods: Sequence[PowerUpFood],
        enabled_kinds: Sequence[str],
        now: float,
    ) -> Optional[PowerUpFood]:
        """
        Roll for a power-up after new food was placed.

        Returns the new PowerUpFood (not yet added to any ledger) or None.
        """
        roll = self.rng.random()
        if roll >= self.power_up_chance or not enabled_kinds:
            return None

        kind = self.rng.choice(list(enabled_kinds))
        existing = sum(1 for p in power_up_foods if p.kind == kind)
        if existing >= self.max_per_kind:
            logger.debug("Power-up cap reached for %s", kind)
            return None

        occupied: Set[Tuple[int, int]] = set(snake_cells)
        occupied.update(p.cell for p in power_up_foods)
        if food is not None:
            occupied.add(food)

        cell = self.random_free_cell(occupied)
        if cell is None:
            return None
        return PowerUpFood(cell=cell, kind=kind, created_at=now)

