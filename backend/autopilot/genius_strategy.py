"""
A* pathfinding strategy.

The direct step toward the food is taken whenever it is free; otherwise a full
A* search runs over the board. Open-set ties on f-score are broken by insertion
order, so the search is deterministic. Without a path the decision is handed to
the lookahead strategy.
"""

import heapq
import itertools
from typing import Dict, List, Optional, Sequence, Set, Tuple

from domain.board import Board
from domain.constants import DOWN, LEFT, RIGHT, UP
from .base import Strategy
from .smart_strategy import SmartStrategy

Cell = Tuple[int, int]


class GeniusStrategy(Strategy):

    level = "genius"

    def __init__(self, fallback: Optional[Strategy] = None):
        self.fallback = fallback or SmartStrategy()

    def next_heading(
        self,
        snake: Sequence[Cell],
        food: Cell,
        board: Board,
    ) -> str:
        snake = list(snake)
        head = snake[0]
        # The tail moves out of the way on the next tick
        blocked = set(snake[:-1])

        direct = _direct_heading(head, food, board)
        if direct is not None:
            nxt = board.next_cell(head, direct)
            if nxt is not None and nxt not in blocked:
                return direct

        path = find_path(head, food, blocked, board)
        if path is not None and len(path) > 1:
            heading = board.heading_between(path[0], path[1])
            if heading is not None:
                return heading

        return self.fallback.next_heading(snake, food, board)


def find_path(start: Cell, goal: Cell, blocked: Set[Cell], board: Board) -> Optional[List[Cell]]:
    """
    A* over the board with unit step cost and wrap-aware Manhattan heuristic.

    Returns the path from start to goal inclusive, or None if goal is unreachable.
    """
    counter = itertools.count()
    open_heap = [(board.manhattan_distance(start, goal), next(counter), start)]
    came_from: Dict[Cell, Optional[Cell]] = {start: None}
    g_score: Dict[Cell, int] = {start: 0}
    closed: Set[Cell] = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current == goal:
            return _reconstruct(came_from, current)
        if current in closed:
            continue
        closed.add(current)

        for _, neighbor in board.neighbors(current):
            if neighbor in blocked:
                continue
            tentative = g_score[current] + 1
            if tentative < g_score.get(neighbor, float("inf")):
                g_score[neighbor] = tentative
                came_from[neighbor] = current
                f_score = tentative + board.manhattan_distance(neighbor, goal)
                heapq.heappush(open_heap, (f_score, next(counter), neighbor))

    return None


def _reconstruct(came_from: Dict[Cell, Optional[Cell]], current: Cell) -> List[Cell]:
    path = [current]
    while came_from[current] is not None:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def _direct_heading(head: Cell, food: Cell, board: Board) -> Optional[str]:
    dx = board.axis_distance(head[0], food[0], board.width)
    dy = board.axis_distance(head[1], food[1], board.height)
    if dx == 0 and dy == 0:
        return None
    if abs(dx) >= abs(dy):
        return RIGHT if dx > 0 else LEFT
    return DOWN if dy > 0 else UP
