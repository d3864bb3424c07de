"""
Game constants for the snake simulation.
"""

# Headings (screen coordinates: y grows downward)
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
NONE = "NONE"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Fixed scan order used wherever headings are tried one by one
HEADING_ORDER = (UP, RIGHT, DOWN, LEFT)

OPPOSITE = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
    NONE: NONE,
}

DELTAS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
    NONE: (0, 0),
}

# Boundary modes
OPEN = "OPEN"      # no walls, coordinates wrap
CLOSED = "CLOSED"  # walls kill
BOUNDARY_MODES = {OPEN, CLOSED}

# Base tick intervals in seconds, slowest first
SPEED_LADDER = (0.3, 0.25, 0.2, 0.15, 0.1)
DEFAULT_SPEED_LEVEL = 2

INITIAL_SNAKE_LENGTH = 3
