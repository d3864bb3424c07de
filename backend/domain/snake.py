"""
Snake entity for the game engine.
"""

from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .board import Board
from .constants import INITIAL_SNAKE_LENGTH, NONE, OPPOSITE, RIGHT, VALID_MOVES


@dataclass
class MoveResult:
    """Outcome of a single advance."""
    moved: bool
    ate_food: bool = False
    eaten_cell: Optional[Tuple[int, int]] = None
    collided: bool = False
    death_reason: Optional[str] = None


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        heading: committed heading, the one the last move used
        pending_heading: heading requested for the next move
        alive: whether this snake is still alive
        death_reason: 'wall' or 'self'
    """

    def __init__(self, positions: List[Tuple[int, int]], heading: str = RIGHT):
        if not positions:
            raise ValueError("A snake needs at least one cell.")
        self.positions = deque(positions)
        self.heading = heading
        self.pending_heading = heading
        self.alive = True
        self.death_reason: Optional[str] = None

    @classmethod
    def centered(cls, board: Board) -> "Snake":
        """Build the start-of-game snake: three cells facing right, centered."""
        if board.width < INITIAL_SNAKE_LENGTH:
            raise ValueError(
                f"Board width must be at least {INITIAL_SNAKE_LENGTH} to place the snake."
            )
        start_x = max(board.width // 2, INITIAL_SNAKE_LENGTH - 1)
        start_y = board.height // 2
        positions = [(start_x - i, start_y) for i in range(INITIAL_SNAKE_LENGTH)]
        return cls(positions, heading=RIGHT)

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Tuple[int, int]:
        return self.positions[-1]

    def __len__(self):
        return len(self.positions)

    def cells(self) -> List[Tuple[int, int]]:
        return list(self.positions)

    def request_heading(self, heading: str) -> bool:
        """
        Queue a heading change from the player.

        Rejected when it reverses either the pending or the committed heading,
        so two quick turns between ticks can't fold the head back into the neck.
        """
        if heading not in VALID_MOVES:
            return False
        if heading == OPPOSITE[self.pending_heading] or heading == OPPOSITE[self.heading]:
            return False
        self.pending_heading = heading
        return True

    def steer(self, heading: str) -> None:
        """Set the pending heading directly (autopilot decisions)."""
        self.pending_heading = heading

    def advance(
        self,
        board: Board,
        food: Optional[Tuple[int, int]],
        power_up_cells: Iterable[Tuple[int, int]] = (),
    ) -> MoveResult:
        """
        Move one cell along the pending heading.

        Growth happens when the new head lands on the food or a power-up cell;
        otherwise the tail is dropped. A collision marks the snake dead and leaves
        its cells untouched.
        """
        if not self.alive:
            return MoveResult(moved=False, collided=True, death_reason=self.death_reason)

        heading = self.pending_heading
        if heading == NONE:
            return MoveResult(moved=False)

        new_head = board.next_cell(self.head, heading)
        if new_head is None:
            return self._die("wall")

        power_up_cells = set(power_up_cells)
        ate_food = new_head == food
        grows = ate_food or new_head in power_up_cells

        # The tail vacates this tick unless the snake is growing
        body = list(self.positions) if grows else list(self.positions)[:-1]
        if new_head in body:
            return self._die("self")

        self.positions.appendleft(new_head)
        if not grows:
            self.positions.pop()
        self.heading = heading

        return MoveResult(
            moved=True,
            ate_food=ate_food,
            eaten_cell=new_head if grows else None,
        )

    def _die(self, reason: str) -> MoveResult:
        self.alive = False
        self.death_reason = reason
        return MoveResult(moved=False, collided=True, death_reason=reason)

    def __repr__(self):
        return f"<Snake len={len(self.positions)} head={self.head} heading={self.heading}>"
