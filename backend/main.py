import random
import time
import uuid
import json
import logging
import argparse
from typing import Any, Callable, Dict, List, Optional, Tuple

from autopilot import Autopilot, AVAILABLE_LEVELS
from config import GameConfig, load_config
from domain.board import Board
from domain.constants import OPEN, SPEED_LADDER
from domain.game_state import GameState
from domain.power_ups import LABELS, PowerUpLedger
from domain.snake import MoveResult, Snake
from domain.spawner import FoodSpawner
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
from services.tick_scheduler import SimulatedClock, TickScheduler
from services.webhook_service import GameWebhookNotifier

logger = logging.getLogger(__name__)

HOST_FRAME_TIME = 1 / 60


class SnakeGame:
    """
    Manages:
      - Board (width, height, walls on/off)
      - The snake and its pending heading
      - Food and power-up foods
      - Active power-up effects and the tick interval they imply
      - Score
      - The autopilot
      - The tick scheduler driving step_once()

    Collaborators (stats, audio, UI) hear about the game through self.events;
    stats also get the record_game_start / record_score / record_game_end hooks.
    """
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
        events: Optional[GameEvents] = None,
        stats=None,
        game_id: Optional[str] = None,
    ):
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.clock = clock or time.monotonic
        self.events = events or GameEvents()
        self.stats = stats
        self.game_id = game_id or str(uuid.uuid4())

        self.board = Board(self.config.width, self.config.height, self.config.boundary_mode)
        self.spawner = self._build_spawner()
        self.ledger = PowerUpLedger()
        self.autopilot = Autopilot(self.config.autopilot_level)
        self.autopilot_enabled = self.config.autopilot_enabled
        self.scheduler = TickScheduler(
            self.step_once,
            self.config.base_interval,
            max_catch_up_ticks=self.config.max_catch_up_ticks,
            clock=self.clock,
        )

        self.snake: Optional[Snake] = None
        self.food: Optional[Tuple[int, int]] = None
        self.score = 0
        self.tick_count = 0
        self.started = False
        self.game_over = False
        self.paused = False
        self.death_reason: Optional[str] = None
        self.history: List[GameState] = []
        self._stepping = False

    def _build_spawner(self) -> FoodSpawner:
        return FoodSpawner(
            self.board,
            rng=self.rng,
            safe_zone_rows=self.config.safe_zone_rows,
            max_attempts=self.config.max_spawn_attempts,
            power_up_chance=self.config.power_up_chance,
            max_per_kind=self.config.max_power_ups_per_kind,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Reset everything and begin a new game."""
        if self.started and not self.game_over:
            self._record_stats("record_game_end")

        self.board = Board(self.config.width, self.config.height, self.config.boundary_mode)
        self.spawner = self._build_spawner()
        self.ledger.clear()
        self.snake = Snake.centered(self.board)
        self.score = 0
        self.tick_count = 0
        self.game_over = False
        self.paused = False
        self.death_reason = None
        self.history = []
        self.started = True

        logger.info(
            "Game %s started on %s (autopilot: %s)",
            self.game_id, self.board,
            self.autopilot.current_level if self.autopilot_enabled else "off",
        )
        self._record_stats("record_game_start", self.autopilot_enabled)

        if not self._place_food(self.clock()):
            self._end_game("board_full")
            return

        self.scheduler.start(self.current_interval)
        self._publish_state()

    def restart(self) -> None:
        self.game_id = str(uuid.uuid4())
        self.start()

    def pause(self) -> None:
        """Stop the scheduler; no time accumulates while paused."""
        if not self.started or self.game_over or self.paused:
            return
        self.paused = True
        self.scheduler.stop()
        logger.info("Game %s paused", self.game_id)

    def resume(self) -> None:
        if not self.paused or self.game_over:
            return
        self.paused = False
        self.scheduler.start(self.current_interval)
        logger.info("Game %s resumed", self.game_id)

    def stop(self) -> None:
        """End the session without a collision, e.g. when a headless run hits its tick limit."""
        if not self.started or self.game_over:
            return
        self.scheduler.stop()
        self._record_stats("record_game_end")
        self.started = False
        logger.info("Game %s stopped after %d ticks (score %d)", self.game_id, self.tick_count, self.score)

    def tick(self, delta: float) -> int:
        """Feed host-loop elapsed time to the scheduler; returns ticks fired."""
        return self.scheduler.tick(delta)

    # ------------------------------------------------------------------
    # Input and live settings
    # ------------------------------------------------------------------
    def request_heading(self, heading: str) -> bool:
        if not self.started or self.game_over:
            return False
        return self.snake.request_heading(heading)

    def force_move(self, heading: str) -> bool:
        """
        Repeat-input handling: a heading requested twice in a row (it is already
        the pending heading) steps the game immediately. Returns True if an
        extra step ran.

        Forced moves arriving while a tick is in flight, or while paused, are dropped.
        """
        if not self.started or self.game_over or self.paused:
            return False
        if heading != self.snake.pending_heading:
            self.request_heading(heading)
            return False
        if self._stepping:
            logger.debug("Forced move ignored: tick in flight")
            return False
        return self.step_once() is not None

    def set_autopilot(self, enabled: bool, level: Optional[str] = None) -> None:
        self.autopilot_enabled = enabled
        if level is not None:
            self.autopilot.change_level(level)
        self.config = self.config.with_overrides(
            autopilot_enabled=enabled, autopilot_level=self.autopilot.current_level
        )

    def set_speed_level(self, speed_level: int) -> None:
        self.config = self.config.with_overrides(speed_level=speed_level)
        self._update_interval()

    def update_config(self, **overrides) -> None:
        """
        Apply new settings. Speed, autopilot and power-up settings apply at once;
        board size and walls apply from the next start().
        """
        self.config = self.config.with_overrides(**overrides)
        self.autopilot_enabled = self.config.autopilot_enabled
        self.autopilot.change_level(self.config.autopilot_level)
        self._update_interval()

    @property
    def current_interval(self) -> float:
        return self.ledger.effective_interval(self.config.base_interval)

    # ------------------------------------------------------------------
    # Simulation step
    # ------------------------------------------------------------------
    def step_once(self) -> Optional[MoveResult]:
        """
        Advance the game by exactly one tick.

        Called by the scheduler and by force_move(). Returns None when the game
        is not running or a step is already in progress.
        """
        if not self.started or self.game_over:
            return None
        if self._stepping:
            return None

        self._stepping = True
        try:
            return self._advance()
        finally:
            self._stepping = False

    def _advance(self) -> MoveResult:
        now = self.clock()
        # Expired power-up foods leave the board before anything can eat them
        self._sweep_expired(now)

        if self.autopilot_enabled and self.food is not None:
            decision = self.autopilot.calculate_next_move(self.snake.cells(), self.food, self.board)
            self.snake.steer(decision)

        result = self.snake.advance(self.board, self.food, self.ledger.food_cells())
        if result.collided:
            self._end_game(result.death_reason)
            return result

        if result.moved:
            self.tick_count += 1

        if result.ate_food:
            self._handle_food_eaten(now)
            if self.game_over:
                return result
        elif result.eaten_cell is not None:
            self._handle_power_up_collected(result.eaten_cell, now)

        self._update_interval()
        self._publish_state()
        return result

    def _handle_food_eaten(self, now: float) -> None:
        multiplier = self.ledger.score_multiplier()
        self.score += multiplier
        logger.debug("Food eaten at tick %d, score %d (x%d)", self.tick_count, self.score, multiplier)
        self._record_stats("record_score", self.score)
        self.events.emit(FOOD_EATEN, self.score, multiplier)

        if not self._place_food(now):
            logger.info("No free cell left for food")
            self._end_game("board_full")

    def _handle_power_up_collected(self, cell: Tuple[int, int], now: float) -> None:
        power_up = self.ledger.take_food(cell)
        if power_up is None:
            return
        self.ledger.collect(power_up.kind, now)
        logger.debug("Collected %s at %s", LABELS[power_up.kind], cell)
        self.events.emit(POWER_UP_COLLECTED, power_up.kind)

    def _place_food(self, now: float) -> bool:
        cell = self.spawner.place_food(self.snake.cells(), self.ledger.foods)
        self.food = cell
        if cell is None:
            return False

        power_up = self.spawner.maybe_spawn_power_up(
            self.snake.cells(),
            cell,
            self.ledger.foods,
            self.config.active_power_up_kinds(),
            now,
        )
        if power_up is not None:
            self.ledger.add_food(power_up)
            logger.debug("Spawned %s at %s", LABELS[power_up.kind], power_up.cell)
        return True

    def _sweep_expired(self, now: float) -> None:
        expired_effects, expired_foods = self.ledger.sweep_expired(now)
        for effect in expired_effects:
            logger.debug("%s effect expired", LABELS[effect.kind])
            self.events.emit(POWER_UP_EXPIRED, effect.kind)
        if expired_foods:
            logger.debug("%d uncollected power-up(s) expired", len(expired_foods))

    def _update_interval(self) -> None:
        interval = self.current_interval
        if interval != self.scheduler.interval:
            self.scheduler.set_interval(interval)
            self.events.emit(TICK_INTERVAL_CHANGED, interval)

    def _end_game(self, reason: Optional[str]) -> None:
        self.game_over = True
        self.death_reason = reason
        self.scheduler.stop()
        self._record_stats("record_game_end")
        logger.info(
            "Game %s over after %d ticks: %s (score %d)",
            self.game_id, self.tick_count, reason, self.score,
        )
        if self.config.record_history:
            self.history.append(self.get_current_state())
        self.events.emit(GAME_OVER, self.score)

    def _publish_state(self) -> None:
        snapshot = self.get_current_state()
        if self.config.record_history:
            self.history.append(snapshot)
        self.events.emit(STATE_CHANGED, snapshot)

    def _record_stats(self, hook: str, *args: Any) -> None:
        """Call a stats hook; a failing stats backend never stops the game."""
        if self.stats is None:
            return
        try:
            getattr(self.stats, hook)(*args)
        except Exception as e:  # noqa: BLE001 - stats are fire-and-forget
            logger.warning("Could not record stats (%s): %s", hook, e)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            tick=self.tick_count,
            snake=self.snake.cells() if self.snake is not None else [],
            heading=self.snake.heading if self.snake is not None else None,
            alive=not self.game_over,
            score=self.score,
            food=self.food,
            power_up_foods=list(self.ledger.foods),
            active_power_ups=list(self.ledger.active),
            width=self.board.width,
            height=self.board.height,
            boundary_mode=self.board.boundary_mode,
            interval=self.current_interval,
            death_reason=self.death_reason,
        )

    def print_board(self) -> None:
        logger.info("\n%s", self.get_current_state().print_board())


def run_simulation(
    config: Optional[GameConfig] = None,
    max_ticks: int = 1000,
    seed: Optional[int] = None,
    include_history: bool = False,
    stats: Optional[InMemoryStatsRecorder] = None,
    webhook_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Runs a single headless autopilot game on a simulated clock.

    The host loop advances the clock one frame (1/60 s) at a time and feeds it
    to the scheduler, exactly like a render loop would.

    Args:
        config: Game settings; the autopilot is switched on regardless.
        max_ticks: Stop after this many ticks if the snake is still alive.
        seed: Seed for food placement; falls back to config.seed.
        include_history: Include every snapshot in the result.
        stats: Recorder that receives the game's stats hooks (e.g. the sqlite
            StatsRecorder); a fresh in-memory one is used when omitted.
        webhook_url: Game over webhook; falls back to SNAKE_GAME_WEBHOOK_URL.

    Returns:
        A dictionary summarizing the game.
    """
    config = (config or GameConfig()).with_overrides(
        autopilot_enabled=True, record_history=include_history
    )
    clock = SimulatedClock()
    if stats is None:
        stats = InMemoryStatsRecorder(clock=clock)
    else:
        # Playtime is counted in simulated seconds
        stats.clock = clock
    rng = random.Random(seed if seed is not None else config.seed)
    game = SnakeGame(config, rng=rng, clock=clock, stats=stats)
    notifier = GameWebhookNotifier(game, webhook_url=webhook_url)
    if notifier.enabled:
        notifier.attach(game.events)
    game.start()

    try:
        while not game.game_over and game.tick_count < max_ticks:
            clock.advance(HOST_FRAME_TIME)
            game.tick(HOST_FRAME_TIME)

        if not game.game_over:
            game.stop()
    finally:
        # Queued posts finish in the background
        notifier.close(wait=False)

    state = game.get_current_state()
    result = {
        "game_id": game.game_id,
        "autopilot_level": game.autopilot.current_level,
        "final_score": game.score,
        "ticks": game.tick_count,
        "snake_length": len(state.snake),
        "game_over": game.game_over,
        "death_reason": game.death_reason,
        "simulated_seconds": round(clock(), 3),
        "board": {
            "width": config.width,
            "height": config.height,
            "boundary_mode": config.boundary_mode,
        },
        "stats": stats.get_stats().to_dict(),
        "final_board": state.print_board(),
    }
    if include_history:
        result["history"] = [snapshot.to_dict() for snapshot in game.history]
    return result


# -------------------------------
# Main Entry Point
# -------------------------------
def main():
    parser = argparse.ArgumentParser(
        description="Run a headless snake game driven by the autopilot."
    )
    parser.add_argument("--level", type=str, choices=AVAILABLE_LEVELS, default=None,
                        help="Autopilot level (default: SNAKE_AUTOPILOT_LEVEL or basic)")
    parser.add_argument("--width", type=int, default=None, help="Board width in cells")
    parser.add_argument("--height", type=int, default=None, help="Board height in cells")
    parser.add_argument("--open", action="store_true",
                        help="Turn walls off: the board wraps around at the edges")
    parser.add_argument("--speed-level", type=int, choices=range(len(SPEED_LADDER)), default=None,
                        help="Index into the speed ladder (0 = slowest)")
    parser.add_argument("--no-power-ups", action="store_true", help="Disable power-ups")
    parser.add_argument("--max-ticks", type=int, default=1000,
                        help="Maximum number of ticks before the run is cut off")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    overrides = {}
    if args.level is not None:
        overrides["autopilot_level"] = args.level
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    if args.open:
        overrides["boundary_mode"] = OPEN
    if args.speed_level is not None:
        overrides["speed_level"] = args.speed_level
    if args.no_power_ups:
        overrides["power_ups_enabled"] = False

    config = load_config(**overrides)
    result = run_simulation(config, max_ticks=args.max_ticks, seed=args.seed)

    print(result.pop("final_board"))
    print("\nSimulation Result Summary:")
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
