"""
Tests for main.py - the SnakeGame engine and headless runs.
"""

import pytest
import sys
import os
import threading
from unittest.mock import MagicMock, Mock, patch

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig
from domain.constants import UP, LEFT, RIGHT, OPEN
from domain.power_ups import SPEED_UP, SCORE_MULTIPLIER, PowerUpFood
from domain.snake import Snake
from main import SnakeGame, run_simulation
from services.events import (
    FOOD_EATEN,
    GAME_OVER,
    POWER_UP_COLLECTED,
    POWER_UP_EXPIRED,
    STATE_CHANGED,
    TICK_INTERVAL_CHANGED,
    GameEvents,
)
from services.stats_recorder import InMemoryStatsRecorder
from services.tick_scheduler import SimulatedClock

# Out of the snake's way for every test that steps rightwards from (5, 5)
FAR_FOOD = (0, 0)


class Recorder:
    """Collects (event, args) pairs from a GameEvents hub."""

    def __init__(self, events, *names):
        self.calls = []
        for name in names:
            events.subscribe(name, self._make(name))

    def _make(self, name):
        def listener(*args):
            self.calls.append((name, args))
        return listener

    def of(self, name):
        return [args for event, args in self.calls if event == name]


@pytest.fixture
def clock():
    return SimulatedClock()


@pytest.fixture
def game(clock):
    """A started 10x10 walled game with power-up spawning off."""
    config = GameConfig(width=10, height=10, power_ups_enabled=False, seed=1)
    game = SnakeGame(config, clock=clock, stats=InMemoryStatsRecorder(clock=clock))
    game.start()
    game.food = FAR_FOOD
    return game


class TestStart:

    def test_start_centers_snake_and_places_food(self, clock):
        game = SnakeGame(GameConfig(width=10, height=10, seed=4), clock=clock)
        game.start()
        assert game.snake.cells() == [(5, 5), (4, 5), (3, 5)]
        assert game.snake.heading == RIGHT
        assert game.food is not None
        assert game.food not in game.snake.cells()
        assert game.score == 0
        assert game.tick_count == 0
        assert game.scheduler.running is True

    def test_start_publishes_initial_state(self, clock):
        events = GameEvents()
        recorder = Recorder(events, STATE_CHANGED)
        game = SnakeGame(GameConfig(width=10, height=10), clock=clock, events=events)
        game.start()
        (snapshot,), = recorder.of(STATE_CHANGED)
        assert snapshot.tick == 0
        assert snapshot.alive is True

    def test_restart_resets_state_and_issues_new_id(self, game):
        game.food = (6, 5)
        game.step_once()
        old_id = game.game_id
        game.restart()
        assert game.game_id != old_id
        assert game.score == 0
        assert game.tick_count == 0
        assert len(game.snake) == 3

    def test_restart_mid_game_counts_playtime(self, game, clock):
        clock.advance(1.5)
        game.start()
        stats = game.stats.get_stats()
        assert stats.total_games_played == 2
        assert stats.total_playtime == 1.5

    def test_board_too_small_for_food_ends_game_at_start(self, clock):
        events = GameEvents()
        recorder = Recorder(events, GAME_OVER)
        game = SnakeGame(GameConfig(width=3, height=1), clock=clock, events=events)
        game.start()
        assert game.game_over is True
        assert game.death_reason == "board_full"
        assert game.food is None
        assert game.scheduler.running is False
        assert recorder.of(GAME_OVER) == [(0,)]


class TestMovement:

    def test_step_moves_snake_one_cell(self, game):
        result = game.step_once()
        assert result.moved is True
        assert game.snake.cells() == [(6, 5), (5, 5), (4, 5)]
        assert game.tick_count == 1

    def test_walls_kill_on_closed_board(self, game):
        recorder = Recorder(game.events, GAME_OVER)
        for _ in range(4):
            game.step_once()
        assert game.snake.head == (9, 5)
        result = game.step_once()
        assert result.collided is True
        assert game.game_over is True
        assert game.death_reason == "wall"
        assert game.tick_count == 4
        assert game.scheduler.running is False
        assert recorder.of(GAME_OVER) == [(0,)]

    def test_open_board_wraps(self, clock):
        config = GameConfig(width=10, height=10, boundary_mode=OPEN, power_ups_enabled=False)
        game = SnakeGame(config, clock=clock)
        game.start()
        game.food = (5, 0)
        for _ in range(5):
            game.step_once()
        assert game.snake.head == (0, 5)
        assert game.game_over is False

    def test_self_collision_ends_game(self, game):
        game.snake = Snake([(5, 5), (5, 6), (4, 6), (4, 5), (4, 4)], heading=UP)
        assert game.request_heading(LEFT) is True
        game.step_once()
        assert game.game_over is True
        assert game.death_reason == "self"

    def test_reverse_heading_is_rejected(self, game):
        assert game.request_heading(LEFT) is False
        assert game.request_heading(UP) is True

    def test_step_after_game_over_does_nothing(self, game):
        for _ in range(5):
            game.step_once()
        assert game.game_over is True
        assert game.step_once() is None
        assert game.request_heading(UP) is False

    def test_tick_drives_steps_through_scheduler(self, game):
        # base interval 0.2; 0.25 fires one tick and keeps 0.05
        assert game.tick(0.25) == 1
        assert game.tick_count == 1


class TestFoodAndScore:

    def test_eating_grows_and_scores(self, game):
        recorder = Recorder(game.events, FOOD_EATEN)
        game.food = (6, 5)
        result = game.step_once()
        assert result.ate_food is True
        assert game.score == 1
        assert len(game.snake) == 4
        assert game.food is not None
        assert game.food not in game.snake.cells()
        assert recorder.of(FOOD_EATEN) == [(1, 1)]
        assert game.stats.get_stats().high_score == 1

    def test_score_multiplier_triples_points(self, game, clock):
        recorder = Recorder(game.events, FOOD_EATEN)
        game.ledger.collect(SCORE_MULTIPLIER, clock())
        game.food = (6, 5)
        game.step_once()
        assert game.score == 3
        assert recorder.of(FOOD_EATEN) == [(3, 3)]

    def test_filling_the_board_ends_game(self, clock):
        stats = InMemoryStatsRecorder(clock=clock)
        game = SnakeGame(GameConfig(width=4, height=1, power_ups_enabled=False), clock=clock, stats=stats)
        game.start()
        assert game.food == (3, 0)
        clock.advance(2.0)
        game.step_once()
        assert game.score == 1
        assert game.game_over is True
        assert game.death_reason == "board_full"
        recorded = stats.get_stats()
        assert recorded.high_score == 1
        assert recorded.total_playtime == 2.0


class TestPowerUps:

    def test_collecting_speed_up_halves_interval(self, game, clock):
        recorder = Recorder(game.events, POWER_UP_COLLECTED, TICK_INTERVAL_CHANGED)
        game.ledger.add_food(PowerUpFood((6, 5), SPEED_UP, clock()))
        result = game.step_once()
        assert result.eaten_cell == (6, 5)
        assert game.score == 0
        assert len(game.snake) == 4
        assert game.ledger.foods == []
        assert game.current_interval == pytest.approx(0.1)
        assert game.scheduler.interval == pytest.approx(0.1)
        assert recorder.of(POWER_UP_COLLECTED) == [(SPEED_UP,)]
        assert len(recorder.of(TICK_INTERVAL_CHANGED)) == 1

    def test_effect_expires_after_duration(self, game, clock):
        recorder = Recorder(game.events, POWER_UP_EXPIRED)
        game.ledger.add_food(PowerUpFood((6, 5), SPEED_UP, clock()))
        game.step_once()
        clock.advance(9.5)
        game.step_once()
        assert game.ledger.is_active(SPEED_UP)
        clock.advance(0.51)
        game.step_once()
        assert not game.ledger.is_active(SPEED_UP)
        assert game.current_interval == pytest.approx(0.2)
        assert recorder.of(POWER_UP_EXPIRED) == [(SPEED_UP,)]

    def test_expired_power_up_food_cannot_be_eaten(self, game, clock):
        """A power-up left on the board past its duration is gone before the snake reaches it."""
        recorder = Recorder(game.events, POWER_UP_COLLECTED)
        game.ledger.add_food(PowerUpFood((6, 5), SPEED_UP, clock()))
        clock.advance(10.5)
        result = game.step_once()
        assert result.eaten_cell is None
        assert len(game.snake) == 3
        assert game.ledger.foods == []
        assert game.ledger.active == []
        assert game.current_interval == pytest.approx(0.2)
        assert recorder.of(POWER_UP_COLLECTED) == []

    def test_power_ups_spawn_only_when_enabled(self, clock):
        config = GameConfig(width=10, height=10, power_ups_enabled=False, power_up_chance=1.0)
        game = SnakeGame(config, clock=clock)
        game.start()
        assert game.ledger.foods == []

        config = GameConfig(width=10, height=10, power_up_chance=1.0, seed=2)
        game = SnakeGame(config, clock=clock)
        game.start()
        assert len(game.ledger.foods) == 1
        assert game.ledger.foods[0].cell not in game.snake.cells()
        assert game.ledger.foods[0].cell != game.food


class TestPauseAndForcedMoves:

    def test_pause_stops_time(self, game):
        game.pause()
        assert game.paused is True
        assert game.tick(1.0) == 0
        game.resume()
        assert game.tick(0.25) == 1

    def test_force_move_same_heading_steps_now(self, game):
        assert game.force_move(RIGHT) is True
        assert game.tick_count == 1

    def test_force_move_new_heading_only_queues(self, game):
        assert game.force_move(UP) is False
        assert game.tick_count == 0
        assert game.snake.pending_heading == UP

    def test_force_move_while_paused_is_ignored(self, game):
        game.pause()
        assert game.force_move(RIGHT) is False
        assert game.tick_count == 0

    def test_same_new_heading_twice_steps_now(self, game):
        """Double-tapping UP while moving RIGHT turns and steps at once."""
        assert game.force_move(UP) is False
        assert game.force_move(UP) is True
        assert game.snake.head == (5, 4)
        assert game.snake.heading == UP
        assert game.tick_count == 1

    def test_committed_heading_does_not_step_past_a_queued_turn(self, game):
        game.force_move(UP)
        assert game.force_move(RIGHT) is False
        assert game.snake.pending_heading == RIGHT
        assert game.tick_count == 0

    def test_force_move_during_tick_is_ignored(self, game):
        results = []
        game.events.subscribe(STATE_CHANGED, lambda state: results.append(game.force_move(RIGHT)))
        game.step_once()
        assert results == [False]
        assert game.tick_count == 1


class TestCollaboratorFailures:

    def test_failing_stats_never_stop_the_game(self, clock):
        stats = Mock()
        stats.record_game_start.side_effect = RuntimeError("db down")
        stats.record_score.side_effect = RuntimeError("db down")
        game = SnakeGame(GameConfig(width=10, height=10, power_ups_enabled=False), clock=clock, stats=stats)
        game.start()
        game.food = (6, 5)
        game.step_once()
        assert game.score == 1
        assert game.game_over is False
        stats.record_score.assert_called_once_with(1)

    def test_failing_listener_never_stops_the_game(self, game):
        game.events.subscribe(STATE_CHANGED, Mock(side_effect=ValueError("ui crashed")))
        game.step_once()
        game.step_once()
        assert game.tick_count == 2


class TestSettings:

    def test_set_speed_level_updates_interval(self, game):
        recorder = Recorder(game.events, TICK_INTERVAL_CHANGED)
        game.set_speed_level(4)
        assert game.current_interval == pytest.approx(0.1)
        assert game.scheduler.interval == pytest.approx(0.1)
        assert recorder.of(TICK_INTERVAL_CHANGED) == [(game.current_interval,)]

    def test_invalid_speed_level_rejected(self, game):
        with pytest.raises(ValueError):
            game.set_speed_level(9)

    def test_set_autopilot_switches_level(self, game):
        game.set_autopilot(True, "genius")
        assert game.autopilot_enabled is True
        assert game.autopilot.current_level == "genius"
        assert game.config.autopilot_level == "genius"

    def test_autopilot_steers_toward_food(self, game):
        game.set_autopilot(True, "basic")
        game.food = (5, 2)
        game.step_once()
        assert game.snake.head == (5, 4)

    def test_update_config_applies_board_on_next_start(self, game):
        game.update_config(width=12, boundary_mode=OPEN)
        assert game.board.width == 10
        game.start()
        assert game.board.width == 12
        assert game.board.walls_on is False


class TestAutopilotInvariants:

    @pytest.mark.parametrize("level", ["basic", "smart", "genius"])
    def test_length_tracks_score_and_cells_never_overlap(self, level):
        clock = SimulatedClock()
        config = GameConfig(
            width=10, height=10, power_ups_enabled=False,
            autopilot_enabled=True, autopilot_level=level, seed=7,
        )
        game = SnakeGame(config, clock=clock)
        snapshots = []
        game.events.subscribe(STATE_CHANGED, snapshots.append)
        game.start()

        while not game.game_over and game.tick_count < 300:
            clock.advance(0.05)
            game.tick(0.05)

        assert snapshots
        for state in snapshots:
            assert len(state.snake) == 3 + state.score
            assert len(set(state.snake)) == len(state.snake)
            assert state.food not in state.snake
            assert all(0 <= x < 10 and 0 <= y < 10 for x, y in state.snake)


class TestRunSimulation:

    def test_same_seed_same_game(self):
        config = GameConfig(width=10, height=10)
        first = run_simulation(config, max_ticks=200, seed=3)
        second = run_simulation(config, max_ticks=200, seed=3)
        for key in ("final_score", "ticks", "death_reason", "final_board", "snake_length"):
            assert first[key] == second[key]

    def test_stops_at_max_ticks(self):
        config = GameConfig(width=10, height=10, boundary_mode=OPEN)
        result = run_simulation(config, max_ticks=5, seed=1)
        assert result["ticks"] == 5
        assert result["game_over"] is False
        assert result["death_reason"] is None
        assert result["stats"]["total_games_played"] == 1
        assert result["stats"]["ai_games_played"] == 1
        assert result["simulated_seconds"] > 0

    def test_genius_scores_on_small_board(self):
        config = GameConfig(width=10, height=10, autopilot_level="genius")
        result = run_simulation(config, max_ticks=200, seed=11)
        assert result["final_score"] > 0
        assert result["autopilot_level"] == "genius"

    def test_history_has_one_snapshot_per_tick(self):
        config = GameConfig(width=10, height=10, boundary_mode=OPEN)
        result = run_simulation(config, max_ticks=10, seed=5, include_history=True)
        history = result["history"]
        assert len(history) == result["ticks"] + 1
        assert history[0]["tick"] == 0
        assert history[-1]["tick"] == result["ticks"]

    def test_given_stats_recorder_receives_the_game(self):
        stats = InMemoryStatsRecorder()
        config = GameConfig(width=10, height=10, autopilot_level="genius")
        result = run_simulation(config, max_ticks=50, seed=2, stats=stats)
        recorded = stats.get_stats()
        assert recorded.total_games_played == 1
        assert recorded.ai_games_played == 1
        assert recorded.high_score == result["final_score"]
        assert recorded.total_playtime == pytest.approx(result["simulated_seconds"], abs=1e-3)
        assert result["stats"] == recorded.to_dict()

    def test_webhook_is_sent_when_configured(self):
        sent = threading.Event()

        def fake_post(*args, **kwargs):
            sent.set()
            return MagicMock(status_code=200)

        config = GameConfig(width=3, height=1)
        with patch("services.webhook_service.requests.post", side_effect=fake_post) as mock_post:
            result = run_simulation(config, max_ticks=5, seed=1, webhook_url="https://hooks.example.test/snake")
            assert sent.wait(5)
        assert result["death_reason"] == "board_full"
        assert mock_post.call_args.kwargs["json"]["game"]["death_reason"] == "board_full"

    def test_no_webhook_without_url(self, monkeypatch):
        monkeypatch.delenv("SNAKE_GAME_WEBHOOK_URL", raising=False)
        with patch("services.webhook_service.requests.post") as mock_post:
            run_simulation(GameConfig(width=3, height=1), max_ticks=5, seed=1)
        mock_post.assert_not_called()

    def test_history_omitted_by_default(self):
        result = run_simulation(GameConfig(width=10, height=10), max_ticks=3, seed=5)
        assert "history" not in result
        assert result["board"] == {"width": 10, "height": 10, "boundary_mode": "CLOSED"}
