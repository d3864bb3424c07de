"""
Game event hub.

The engine emits events; collaborators (stats, audio, UI, webhooks) subscribe.
Listeners run synchronously in subscription order. A failing listener is
logged and skipped so it can never stall the tick path.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

STATE_CHANGED = "state_changed"
GAME_OVER = "game_over"
FOOD_EATEN = "food_eaten"
POWER_UP_COLLECTED = "power_up_collected"
POWER_UP_EXPIRED = "power_up_expired"
TICK_INTERVAL_CHANGED = "tick_interval_changed"

EVENT_NAMES = {
    STATE_CHANGED,
    GAME_OVER,
    FOOD_EATEN,
    POWER_UP_COLLECTED,
    POWER_UP_EXPIRED,
    TICK_INTERVAL_CHANGED,
}


class GameEvents:
    def __init__(self):
        self._listeners: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        if event not in EVENT_NAMES:
            raise ValueError(f"Unknown event '{event}'.")
        self._listeners[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: str, *args: Any) -> None:
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(*args)
            except Exception as exc:  # noqa: BLE001 - listeners are fire-and-forget
                logger.warning("Listener for '%s' failed: %s", event, exc)
