"""
Lookahead-greedy strategy.

Every heading is checked with a short depth-first walk: the candidate must be
free of the body segments still present at that depth, and the walk must be
able to keep going for LOOKAHEAD_HORIZON ticks without revisiting a cell.
Surviving headings are ranked by distance to the food, with a bonus for
staying clear of the tail.
"""

from typing import Optional, Sequence, Set, Tuple

from domain.board import Board
from domain.constants import HEADING_ORDER, RIGHT
from .base import Strategy

LOOKAHEAD_HORIZON = 3
TAIL_DISTANCE_THRESHOLD = 3
TAIL_CLEARANCE_BONUS = -2


class SmartStrategy(Strategy):

    level = "smart"

    def __init__(self, horizon: int = LOOKAHEAD_HORIZON):
        self.horizon = horizon

    def next_heading(
        self,
        snake: Sequence[Tuple[int, int]],
        food: Tuple[int, int],
        board: Board,
    ) -> str:
        snake = list(snake)
        head, tail = snake[0], snake[-1]

        best_heading: Optional[str] = None
        best_score: Optional[int] = None
        for heading in HEADING_ORDER:
            candidate = board.next_cell(head, heading)
            if candidate is None or not self.is_safe(candidate, snake, board, food):
                continue

            score = board.manhattan_distance(candidate, food)
            if board.manhattan_distance(candidate, tail) > TAIL_DISTANCE_THRESHOLD:
                score += TAIL_CLEARANCE_BONUS

            if best_score is None or score < best_score:
                best_heading, best_score = heading, score

        return best_heading if best_heading is not None else RIGHT

    def is_safe(
        self,
        candidate: Tuple[int, int],
        snake: list,
        board: Board,
        food: Optional[Tuple[int, int]] = None,
    ) -> bool:
        # Eating on the first step keeps the tail in place for one tick
        growth = 1 if candidate == food else 0
        if _occupied_after(candidate, snake, 1 - growth):
            return False
        visited = {candidate}
        return self._can_continue(candidate, snake, board, visited, 1, growth)

    def _can_continue(
        self,
        cell: Tuple[int, int],
        snake: list,
        board: Board,
        visited: Set[Tuple[int, int]],
        depth: int,
        growth: int,
    ) -> bool:
        if depth >= self.horizon:
            return True
        for _, nxt in board.neighbors(cell):
            if nxt in visited or _occupied_after(nxt, snake, depth + 1 - growth):
                continue
            visited.add(nxt)
            if self._can_continue(nxt, snake, board, visited, depth + 1, growth):
                return True
        return False


def _occupied_after(cell: Tuple[int, int], snake: list, ticks: int) -> bool:
    """True if cell is still covered by the body after `ticks` moves (the tail end has vacated)."""
    remaining = max(len(snake) - ticks, 0)
    return cell in snake[:remaining]
