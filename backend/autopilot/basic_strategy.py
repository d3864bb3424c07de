"""
Greedy-direct strategy: head straight for the food along the longer axis.
"""

from typing import Optional, Sequence, Tuple

from domain.board import Board
from domain.constants import DOWN, HEADING_ORDER, LEFT, RIGHT, UP
from .base import Strategy


class BasicStrategy(Strategy):
    """
    Moves along the axis with the larger (wrap-aware) distance to the food,
    tries the other axis when that cell is taken, then any free heading.
    Falls back to RIGHT when boxed in, which is a known losing move.
    """

    level = "basic"

    def next_heading(
        self,
        snake: Sequence[Tuple[int, int]],
        food: Tuple[int, int],
        board: Board,
    ) -> str:
        head = snake[0]
        body = set(snake)

        x_distance = board.axis_distance(head[0], food[0], board.width)
        y_distance = board.axis_distance(head[1], food[1], board.height)

        def would_collide(heading: str) -> bool:
            nxt = board.next_cell(head, heading)
            return nxt is None or nxt in body

        if abs(x_distance) >= abs(y_distance):
            primary = _horizontal(x_distance)
            secondary = DOWN if y_distance > 0 else UP
        else:
            primary = _vertical(y_distance)
            secondary = RIGHT if x_distance > 0 else LEFT

        for heading in (primary, secondary):
            if heading is not None and not would_collide(heading):
                return heading

        for heading in HEADING_ORDER:
            if not would_collide(heading):
                return heading

        return RIGHT


def _horizontal(distance: int) -> Optional[str]:
    if distance > 0:
        return RIGHT
    if distance < 0:
        return LEFT
    return None


def _vertical(distance: int) -> Optional[str]:
    if distance > 0:
        return DOWN
    if distance < 0:
        return UP
    return None
