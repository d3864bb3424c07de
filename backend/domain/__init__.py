"""
Domain entities for the snake simulation.

This module contains the core game entities that are independent of
infrastructure concerns (scheduling, persistence, HTTP, etc.).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, NONE, VALID_MOVES, HEADING_ORDER, OPPOSITE, DELTAS,
    OPEN, CLOSED, SPEED_LADDER,
)
from .board import Board
from .snake import Snake, MoveResult
from .power_ups import (
    SPEED_UP, SLOW_DOWN, SCORE_MULTIPLIER, POWER_UP_KINDS,
    PowerUpFood, ActivePowerUp, PowerUpLedger,
)
from .spawner import FoodSpawner
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'NONE', 'VALID_MOVES', 'HEADING_ORDER',
    'OPPOSITE', 'DELTAS', 'OPEN', 'CLOSED', 'SPEED_LADDER',
    'Board',
    'Snake', 'MoveResult',
    'SPEED_UP', 'SLOW_DOWN', 'SCORE_MULTIPLIER', 'POWER_UP_KINDS',
    'PowerUpFood', 'ActivePowerUp', 'PowerUpLedger',
    'FoodSpawner',
    'GameState',
]
