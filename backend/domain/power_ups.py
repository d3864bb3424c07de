"""
Power-up kinds, the uncollected power-up foods on the board and the ledger of
active effects.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

SPEED_UP = "SPEED_UP"
SLOW_DOWN = "SLOW_DOWN"
SCORE_MULTIPLIER = "SCORE_MULTIPLIER"
POWER_UP_KINDS = (SPEED_UP, SLOW_DOWN, SCORE_MULTIPLIER)

# Seconds an effect stays active once collected, and an uncollected food stays on the board
DURATIONS = {
    SPEED_UP: 10.0,
    SLOW_DOWN: 10.0,
    SCORE_MULTIPLIER: 60.0,
}

SCORE_MULTIPLIERS = {
    SPEED_UP: 1,
    SLOW_DOWN: 1,
    SCORE_MULTIPLIER: 3,
}

LABELS = {
    SPEED_UP: "2x Speed",
    SLOW_DOWN: "1/2 Speed",
    SCORE_MULTIPLIER: "3x Points",
}


@dataclass(frozen=True)
class PowerUpFood:
    cell: Tuple[int, int]
    kind: str
    created_at: float

    def is_expired(self, now: float) -> bool:
        return now - self.created_at >= DURATIONS[self.kind]

    def remaining(self, now: float) -> float:
        return max(0.0, DURATIONS[self.kind] - (now - self.created_at))

    def to_dict(self) -> dict:
        return {"cell": list(self.cell), "kind": self.kind, "created_at": self.created_at}


@dataclass(frozen=True)
class ActivePowerUp:
    kind: str
    expires_at: float

    @property
    def multiplier(self) -> int:
        return SCORE_MULTIPLIERS[self.kind]

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def remaining(self, now: float) -> float:
        return max(0.0, self.expires_at - now)

    def progress(self, now: float) -> float:
        """Fraction of the effect still left, 1.0 when fresh."""
        return self.remaining(now) / DURATIONS[self.kind]

    def to_dict(self) -> dict:
        return {"kind": self.kind, "expires_at": self.expires_at}


class PowerUpLedger:
    """
    Tracks power-up foods waiting on the board and the effects currently active.

    Same-kind effects stack as separate entries; lookups take the first match.
    """

    def __init__(self):
        self.foods: List[PowerUpFood] = []
        self.active: List[ActivePowerUp] = []

    def add_food(self, food: PowerUpFood) -> None:
        self.foods.append(food)

    def food_cells(self) -> List[Tuple[int, int]]:
        return [food.cell for food in self.foods]

    def food_at(self, cell: Tuple[int, int]) -> Optional[PowerUpFood]:
        for food in self.foods:
            if food.cell == cell:
                return food
        return None

    def take_food(self, cell: Tuple[int, int]) -> Optional[PowerUpFood]:
        """Remove and return the power-up food on cell, if there is one."""
        food = self.food_at(cell)
        if food is not None:
            self.foods.remove(food)
        return food

    def count_foods(self, kind: str) -> int:
        return sum(1 for food in self.foods if food.kind == kind)

    def collect(self, kind: str, now: float) -> ActivePowerUp:
        if kind not in DURATIONS:
            raise ValueError(f"Unknown power-up kind '{kind}'.")
        effect = ActivePowerUp(kind=kind, expires_at=now + DURATIONS[kind])
        self.active.append(effect)
        return effect

    def sweep_expired(self, now: float) -> Tuple[List[ActivePowerUp], List[PowerUpFood]]:
        """Drop expired effects and uncollected foods; return what was removed."""
        expired_effects = [effect for effect in self.active if effect.is_expired(now)]
        expired_foods = [food for food in self.foods if food.is_expired(now)]
        if expired_effects:
            self.active = [effect for effect in self.active if not effect.is_expired(now)]
        if expired_foods:
            self.foods = [food for food in self.foods if not food.is_expired(now)]
        return expired_effects, expired_foods

    def find_active(self, kind: str) -> Optional[ActivePowerUp]:
        for effect in self.active:
            if effect.kind == kind:
                return effect
        return None

    def is_active(self, kind: str) -> bool:
        return self.find_active(kind) is not None

    def effective_interval(self, base_interval: float) -> float:
        """SpeedUp halves the interval and wins over SlowDown, which doubles it."""
        if self.is_active(SPEED_UP):
            return base_interval / 2
        if self.is_active(SLOW_DOWN):
            return base_interval * 2
        return base_interval

    def score_multiplier(self) -> int:
        effect = self.find_active(SCORE_MULTIPLIER)
        return effect.multiplier if effect is not None else 1

    def clear(self) -> None:
        self.foods.clear()
        self.active.clear()
