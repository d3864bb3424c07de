"""
Registry for autopilot levels.

Maps level keys ('basic', 'smart', 'genius') to strategy classes. To add a
level, write the strategy module, import it here and add an entry to
STRATEGY_LOADERS and LEVEL_DESCRIPTIONS.
"""

from typing import Callable, Dict, List, Optional, Type

from .base import Strategy

BASIC = "basic"
SMART = "smart"
GENIUS = "genius"


# Lazy imports keep the registry importable from the strategy modules
def _get_basic_strategy() -> Type[Strategy]:
    from .basic_strategy import BasicStrategy
    return BasicStrategy


def _get_smart_strategy() -> Type[Strategy]:
    from .smart_strategy import SmartStrategy
    return SmartStrategy


def _get_genius_strategy() -> Type[Strategy]:
    from .genius_strategy import GeniusStrategy
    return GeniusStrategy


STRATEGY_LOADERS: Dict[str, Callable[[], Type[Strategy]]] = {
    BASIC: _get_basic_strategy,
    SMART: _get_smart_strategy,
    GENIUS: _get_genius_strategy,
}

LEVEL_DESCRIPTIONS: Dict[str, str] = {
    BASIC: "Greedy: heads straight for the food along the longer axis",
    SMART: "Lookahead: avoids moves that trap the snake within a few ticks",
    GENIUS: "A* search: shortest path to the food around the body",
}

AVAILABLE_LEVELS = list(STRATEGY_LOADERS.keys())


def normalize_level(level: Optional[str]) -> str:
    """Map None/empty to 'basic' and lowercase everything else."""
    if not level or level.strip() == "":
        return BASIC
    return level.strip().lower()


def get_strategy_class(level: Optional[str] = None) -> Type[Strategy]:
    """
    Get the strategy class for a level key.

    Raises:
        ValueError: If the level is not recognized.
    """
    level = normalize_level(level)
    if level not in STRATEGY_LOADERS:
        available = ", ".join(AVAILABLE_LEVELS)
        raise ValueError(f"Unknown autopilot level '{level}'. Available levels: {available}")
    return STRATEGY_LOADERS[level]()


def list_levels() -> List[Dict[str, str]]:
    """Return a dict with 'key' and 'description' for every level."""
    return [{"key": key, "description": LEVEL_DESCRIPTIONS[key]} for key in AVAILABLE_LEVELS]
