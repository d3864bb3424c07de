"""
GameState entity - a snapshot of the game at a point in time.
"""

from typing import List, Tuple, Optional

from .power_ups import ActivePowerUp, PowerUpFood, SCORE_MULTIPLIER, SLOW_DOWN, SPEED_UP

POWER_UP_SYMBOLS = {
    SPEED_UP: '+',
    SLOW_DOWN: '-',
    SCORE_MULTIPLIER: '*',
}


class GameState:
    """
    A snapshot of the game at a specific point in time.

    Attributes:
        tick: number of completed ticks
        snake: list of (x, y), head first
        heading: committed heading of the snake
        alive: whether the snake is still alive
        death_reason: 'wall', 'self', 'board_full' or None
        score: current score
        food: (x, y) of the food, None once the board is full
        power_up_foods: uncollected power-ups on the board
        active_power_ups: effects currently running
        width, height: board dimensions
        boundary_mode: OPEN or CLOSED
        interval: seconds between ticks at the time of the snapshot
    """

    def __init__(
        self,
        tick: int,
        snake: List[Tuple[int, int]],
        heading: str,
        alive: bool,
        score: int,
        food: Optional[Tuple[int, int]],
        power_up_foods: List[PowerUpFood],
        active_power_ups: List[ActivePowerUp],
        width: int,
        height: int,
        boundary_mode: str,
        interval: float,
        death_reason: Optional[str] = None,
    ):
        self.tick = tick
        self.snake = snake
        self.heading = heading
        self.alive = alive
        self.score = score
        self.food = food
        self.power_up_foods = power_up_foods
        self.active_power_ups = active_power_ups
        self.width = width
        self.height = height
        self.boundary_mode = boundary_mode
        self.interval = interval
        self.death_reason = death_reason

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        +, -, * = speed-up, slow-down and score multiplier power-ups
        H = snake head
        S = snake body
        (0,0) is the top left, matching movement where UP decreases y.
        """
        board = [['.' for _ in range(self.width)] for _ in range(self.height)]

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'F'

        for power_up in self.power_up_foods:
            px, py = power_up.cell
            board[py][px] = POWER_UP_SYMBOLS.get(power_up.kind, '?')

        for idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if idx == 0 else 'S'

        result = [f"{y:2d} {' '.join(board[y])}" for y in range(self.height)]
        result.append("   " + " ".join(str(i % 10) for i in range(self.width)))
        return "\n".join(result)

    def to_dict(self) -> dict:
        return {
            "tick": self.tick,
            "snake": [list(cell) for cell in self.snake],
            "heading": self.heading,
            "alive": self.alive,
            "death_reason": self.death_reason,
            "score": self.score,
            "food": list(self.food) if self.food is not None else None,
            "power_up_foods": [p.to_dict() for p in self.power_up_foods],
            "active_power_ups": [a.to_dict() for a in self.active_power_ups],
            "width": self.width,
            "height": self.height,
            "boundary_mode": self.boundary_mode,
            "interval": self.interval,
        }

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, food={self.food}, "
            f"length={len(self.snake)}, score={self.score}>"
        )
