"""
Game configuration.

GameConfig holds everything the engine reads at game start (board, walls,
speed, autopilot, power-ups). load_config() builds one from SNAKE_* environment
variables, loading a .env file first.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from dotenv import load_dotenv

from autopilot.level_registry import AVAILABLE_LEVELS, BASIC, normalize_level
from domain.constants import BOUNDARY_MODES, CLOSED, DEFAULT_SPEED_LEVEL, OPEN, SPEED_LADDER
from domain.power_ups import POWER_UP_KINDS
from domain.spawner import DEFAULT_MAX_ATTEMPTS, DEFAULT_MAX_PER_KIND, DEFAULT_POWER_UP_CHANCE
from services.tick_scheduler import DEFAULT_MAX_CATCH_UP_TICKS

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class GameConfig:
    width: int = 20
    height: int = 20
    boundary_mode: str = CLOSED
    speed_level: int = DEFAULT_SPEED_LEVEL
    autopilot_enabled: bool = False
    autopilot_level: str = BASIC
    power_ups_enabled: bool = True
    enabled_power_ups: Tuple[str, ...] = field(default_factory=lambda: tuple(POWER_UP_KINDS))
    safe_zone_rows: int = 0
    max_spawn_attempts: int = DEFAULT_MAX_ATTEMPTS
    power_up_chance: float = DEFAULT_POWER_UP_CHANCE
    max_power_ups_per_kind: int = DEFAULT_MAX_PER_KIND
    max_catch_up_ticks: int = DEFAULT_MAX_CATCH_UP_TICKS
    seed: Optional[int] = None
    record_history: bool = False

    def __post_init__(self):
        if self.width < 3 or self.height < 1:
            raise ValueError(
                f"Board must be at least 3x1 to hold the starting snake, got {self.width}x{self.height}."
            )
        self.boundary_mode = self.boundary_mode.upper()
        if self.boundary_mode not in BOUNDARY_MODES:
            raise ValueError(f"Unknown boundary mode '{self.boundary_mode}'.")
        if not 0 <= self.speed_level < len(SPEED_LADDER):
            raise ValueError(
                f"speed_level must be between 0 and {len(SPEED_LADDER) - 1}, got {self.speed_level}."
            )
        self.autopilot_level = normalize_level(self.autopilot_level)
        if self.autopilot_level not in AVAILABLE_LEVELS:
            raise ValueError(f"Unknown autopilot level '{self.autopilot_level}'.")
        self.enabled_power_ups = tuple(self.enabled_power_ups)
        unknown = [kind for kind in self.enabled_power_ups if kind not in POWER_UP_KINDS]
        if unknown:
            raise ValueError(f"Unknown power-up kinds: {', '.join(unknown)}.")
        if not 0 <= self.safe_zone_rows < self.height:
            raise ValueError(f"safe_zone_rows must be in [0, {self.height}).")
        if not 0.0 <= self.power_up_chance <= 1.0:
            raise ValueError("power_up_chance must be between 0 and 1.")
        if self.max_spawn_attempts < 1 or self.max_power_ups_per_kind < 0 or self.max_catch_up_ticks < 1:
            raise ValueError("Spawn attempts and catch-up ticks must be positive, the per-kind cap non-negative.")

    @property
    def base_interval(self) -> float:
        return SPEED_LADDER[self.speed_level]

    @property
    def walls_on(self) -> bool:
        return self.boundary_mode == CLOSED

    def active_power_up_kinds(self) -> Tuple[str, ...]:
        """Kinds the spawner may place; empty when power-ups are switched off."""
        return self.enabled_power_ups if self.power_ups_enabled else ()

    def with_overrides(self, **overrides) -> "GameConfig":
        return replace(self, **overrides)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def load_config(**overrides) -> GameConfig:
    """
    Build a GameConfig from the environment.

    Recognised variables: SNAKE_WIDTH, SNAKE_HEIGHT, SNAKE_WALLS, SNAKE_SPEED_LEVEL,
    SNAKE_AUTOPILOT, SNAKE_AUTOPILOT_LEVEL, SNAKE_POWER_UPS, SNAKE_POWER_UP_KINDS
    (comma-separated), SNAKE_SAFE_ZONE_ROWS, SNAKE_SEED. Keyword overrides win.
    """
    load_dotenv()

    kinds_env = os.getenv("SNAKE_POWER_UP_KINDS")
    if kinds_env:
        kinds = tuple(k.strip().upper() for k in kinds_env.split(",") if k.strip())
    else:
        kinds = tuple(POWER_UP_KINDS)

    values = dict(
        width=_env_int("SNAKE_WIDTH", 20),
        height=_env_int("SNAKE_HEIGHT", 20),
        boundary_mode=CLOSED if _env_bool("SNAKE_WALLS", True) else OPEN,
        speed_level=_env_int("SNAKE_SPEED_LEVEL", DEFAULT_SPEED_LEVEL),
        autopilot_enabled=_env_bool("SNAKE_AUTOPILOT", False),
        autopilot_level=os.getenv("SNAKE_AUTOPILOT_LEVEL", BASIC),
        power_ups_enabled=_env_bool("SNAKE_POWER_UPS", True),
        enabled_power_ups=kinds,
        safe_zone_rows=_env_int("SNAKE_SAFE_ZONE_ROWS", 0),
        seed=_env_int("SNAKE_SEED", None),
    )
    values.update(overrides)
    return GameConfig(**values)
