"""
Tests for services/events.py - the game event hub.
"""

import pytest
import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.events import FOOD_EATEN, GAME_OVER, STATE_CHANGED, GameEvents


class TestGameEvents:

    def test_listeners_run_in_subscription_order(self):
        events = GameEvents()
        calls = []
        events.subscribe(FOOD_EATEN, lambda score, mult: calls.append(("first", score, mult)))
        events.subscribe(FOOD_EATEN, lambda score, mult: calls.append(("second", score, mult)))
        events.emit(FOOD_EATEN, 4, 3)
        assert calls == [("first", 4, 3), ("second", 4, 3)]

    def test_emit_only_reaches_matching_event(self):
        events = GameEvents()
        calls = []
        events.subscribe(GAME_OVER, calls.append)
        events.emit(STATE_CHANGED, "snapshot")
        assert calls == []

    def test_emit_without_listeners_is_fine(self):
        GameEvents().emit(GAME_OVER, 0)

    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError):
            GameEvents().subscribe("level_up", print)

    def test_unsubscribe(self):
        events = GameEvents()
        calls = []
        events.subscribe(GAME_OVER, calls.append)
        events.unsubscribe(GAME_OVER, calls.append)
        events.emit(GAME_OVER, 7)
        assert calls == []

    def test_unsubscribe_unknown_listener_is_noop(self):
        GameEvents().unsubscribe(GAME_OVER, print)

    def test_failing_listener_does_not_block_others(self, caplog):
        events = GameEvents()
        calls = []

        def broken(score):
            raise RuntimeError("speaker unplugged")

        events.subscribe(GAME_OVER, broken)
        events.subscribe(GAME_OVER, calls.append)
        events.emit(GAME_OVER, 12)
        assert calls == [12]
        assert "speaker unplugged" in caplog.text

    def test_listener_may_unsubscribe_during_emit(self):
        events = GameEvents()
        calls = []

        def once(score):
            calls.append(score)
            events.unsubscribe(GAME_OVER, once)

        events.subscribe(GAME_OVER, once)
        events.emit(GAME_OVER, 1)
        events.emit(GAME_OVER, 2)
        assert calls == [1]
