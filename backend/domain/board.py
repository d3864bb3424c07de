"""
Board geometry: cell stepping, wrap/reject at the edges and wrap-aware distances.
"""

from typing import List, Optional, Tuple

from .constants import (
    BOUNDARY_MODES,
    CLOSED,
    DELTAS,
    HEADING_ORDER,
    OPEN,
)

Cell = Tuple[int, int]


class Board:
    """
    A fixed-size grid.

    Attributes:
        width, height: board dimensions in cells
        boundary_mode: OPEN (edges wrap) or CLOSED (edges are walls)
    """

    def __init__(self, width: int, height: int, boundary_mode: str = CLOSED):
        if width <= 0 or height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}.")
        if boundary_mode not in BOUNDARY_MODES:
            raise ValueError(f"Unknown boundary mode '{boundary_mode}'.")
        self.width = width
        self.height = height
        self.boundary_mode = boundary_mode

    @property
    def walls_on(self) -> bool:
        return self.boundary_mode == CLOSED

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    @staticmethod
    def step(cell: Cell, heading: str) -> Cell:
        """Apply a single-step move without any edge handling."""
        dx, dy = DELTAS[heading]
        return (cell[0] + dx, cell[1] + dy)

    def wrap_or_reject(self, cell: Cell) -> Optional[Cell]:
        """
        Resolve a cell that may sit one step off the board.

        Open mode wraps it back in (-1 -> size - 1, size -> 0).
        Closed mode returns None, meaning the move hit a wall.
        """
        if self.in_bounds(cell):
            return cell
        if self.boundary_mode == CLOSED:
            return None

        x, y = cell
        if x < 0:
            x = self.width - 1
        elif x >= self.width:
            x = 0
        if y < 0:
            y = self.height - 1
        elif y >= self.height:
            y = 0
        return (x, y)

    def next_cell(self, cell: Cell, heading: str) -> Optional[Cell]:
        return self.wrap_or_reject(self.step(cell, heading))

    def axis_distance(self, start: int, end: int, size: int) -> int:
        """
        Signed shortest delta from start to end along one axis.

        In Open mode the wrap-around delta is used when it is strictly shorter.
        """
        direct = end - start
        if self.boundary_mode == CLOSED:
            return direct

        wrap_around = direct - size if direct > 0 else direct + size
        return direct if abs(direct) < abs(wrap_around) else wrap_around

    def manhattan_distance(self, a: Cell, b: Cell) -> int:
        dx = self.axis_distance(a[0], b[0], self.width)
        dy = self.axis_distance(a[1], b[1], self.height)
        return abs(dx) + abs(dy)

    def neighbors(self, cell: Cell) -> List[Tuple[str, Cell]]:
        """Return (heading, cell) pairs for every legal single step, in HEADING_ORDER."""
        result = []
        for heading in HEADING_ORDER:
            nxt = self.next_cell(cell, heading)
            if nxt is not None:
                result.append((heading, nxt))
        return result

    def heading_between(self, a: Cell, b: Cell) -> Optional[str]:
        """Return the heading that moves a onto the adjacent cell b, if any."""
        for heading, nxt in self.neighbors(a):
            if nxt == b:
                return heading
        return None

    def __repr__(self):
        return f"<Board {self.width}x{self.height} {self.boundary_mode}>"


__all__ = ["Board", "Cell", "OPEN", "CLOSED"]
