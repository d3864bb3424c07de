"""
Autopilot for the snake.

Three interchangeable strategies (basic, smart, genius) behind one Autopilot
object that the game engine asks for a heading once per tick.
"""

import logging
from typing import Optional, Sequence, Tuple

from domain.board import Board
from domain.constants import NONE, RIGHT
from .base import Strategy
from .basic_strategy import BasicStrategy
from .smart_strategy import SmartStrategy
from .genius_strategy import GeniusStrategy
from .level_registry import (
    AVAILABLE_LEVELS,
    BASIC,
    GENIUS,
    SMART,
    get_strategy_class,
    list_levels,
    normalize_level,
)

logger = logging.getLogger(__name__)


class Autopilot:
    """
    Holds the selected strategy and the last heading it produced.
    """

    def __init__(self, level: Optional[str] = BASIC):
        self.current_level = normalize_level(level)
        self.strategy: Strategy = get_strategy_class(self.current_level)()
        self.last_decision: str = NONE

    def calculate_next_move(
        self,
        snake: Sequence[Tuple[int, int]],
        food: Tuple[int, int],
        board: Board,
    ) -> str:
        try:
            decision = self.strategy.next_heading(snake, food, board)
        except Exception as exc:  # noqa: BLE001 - a bad decision must not stop the tick
            logger.warning(
                "Autopilot level %s failed: %s. Falling back to %s.",
                self.current_level, exc, RIGHT,
            )
            decision = RIGHT
        self.last_decision = decision
        return decision

    def change_level(self, level: str) -> None:
        """Swap the strategy; no-op when the level is already selected."""
        level = normalize_level(level)
        if level == self.current_level:
            return
        self.strategy = get_strategy_class(level)()
        self.current_level = level
        logger.info("Autopilot level changed to %s", level)


__all__ = [
    'Autopilot',
    'Strategy',
    'BasicStrategy',
    'SmartStrategy',
    'GeniusStrategy',
    'BASIC', 'SMART', 'GENIUS',
    'AVAILABLE_LEVELS',
    'get_strategy_class',
    'list_levels',
]
