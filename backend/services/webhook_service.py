"""
Webhook service for sending game notifications to external services.

GameWebhookNotifier subscribes to the engine's game_over event and posts a
short summary of the finished game from a background worker. Failures are
logged and never raised.
"""

import os
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from services.events import GAME_OVER, GameEvents

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


def send_webhook(url: str, data: Dict[str, Any], timeout: int = DEFAULT_TIMEOUT) -> bool:
    """
    Send a POST request with JSON data to a webhook URL.

    Args:
        url: The webhook URL to send data to
        data: Dictionary of data to send as JSON
        timeout: Request timeout in seconds (default: 10)

    Returns:
        True if webhook was sent successfully, False otherwise
    """
    if not url:
        logger.warning("No webhook URL provided, skipping webhook")
        return False

    try:
        response = requests.post(
            url,
            json=data,
            timeout=timeout,
            headers={'Content-Type': 'application/json'}
        )
        response.raise_for_status()
        logger.info(f"Webhook sent successfully to {url}")
        return True

    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to send webhook to {url}: {e}")
        return False


def build_game_over_payload(game) -> Dict[str, Any]:
    state = game.get_current_state()
    return {
        'event': 'game_over',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'game': {
            'id': game.game_id,
            'final_score': state.score,
            'ticks': state.tick,
            'snake_length': len(state.snake),
            'death_reason': state.death_reason,
            'board': {
                'width': state.width,
                'height': state.height,
                'boundary_mode': state.boundary_mode,
            },
            'autopilot': game.autopilot.current_level if game.autopilot_enabled else None,
        },
    }


class GameWebhookNotifier:
    """
    Posts a summary for every finished game.

    The URL defaults to the SNAKE_GAME_WEBHOOK_URL environment variable; with no
    URL the notifier stays silent. The payload is built when the game ends and
    the POST runs on the notifier's own worker thread, so a slow endpoint never
    holds up a tick.
    """

    def __init__(self, game, webhook_url: Optional[str] = None, timeout: int = DEFAULT_TIMEOUT):
        self.game = game
        self.url = webhook_url or os.getenv('SNAKE_GAME_WEBHOOK_URL')
        self.timeout = timeout
        self.last_future: Optional[Future] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def attach(self, events: GameEvents) -> None:
        events.subscribe(GAME_OVER, self.on_game_over)

    def on_game_over(self, final_score: int) -> Optional[Future]:
        """Queue the game over POST; returns its Future, or None when no URL is set."""
        if not self.url:
            logger.debug("No webhook URL configured, skipping game over notification")
            return None
        payload = build_game_over_payload(self.game)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="webhook")
        logger.info(f"Queueing game over webhook (score {final_score})")
        self.last_future = self._executor.submit(send_webhook, self.url, payload, self.timeout)
        return self.last_future

    def close(self, wait: bool = True) -> None:
        """Stop accepting notifications; with wait=True block until queued posts finish."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
