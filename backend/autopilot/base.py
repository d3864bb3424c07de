"""
Base strategy interface for the autopilot.
"""

from typing import Sequence, Tuple

from domain.board import Board


class Strategy:
    """
    Base class/interface for autopilot decision logic.

    Each strategy computes one heading per tick from scratch, given the full
    snake (head first), the food cell and the board. Strategies keep no state
    between calls, so swapping them mid-game never leaves a half-done search.
    """

    level = None

    def next_heading(
        self,
        snake: Sequence[Tuple[int, int]],
        food: Tuple[int, int],
        board: Board,
    ) -> str:
        """
        Return a heading for the next tick.

        Args:
            snake: cells from head to tail
            food: target cell
            board: board dimensions and boundary mode

        Returns:
            One of: "UP", "DOWN", "LEFT", "RIGHT"
        """
        raise NotImplementedError
