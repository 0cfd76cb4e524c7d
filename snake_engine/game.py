"""Core game state and logic."""

import asyncio
import logging
import random
import time
from typing import Callable, Optional

from .constants import (
    EFFECT_DURATION, FOOD_POINTS, INITIAL_HEAD_X, INITIAL_LENGTH,
    POWER_UP_CHANCE, POWER_UP_LIFETIME, POWER_UP_POINTS,
    SCHEDULER_INTERVAL, SLOW_DOWN, SPEED_BOOST,
)
from .effects import ActiveEffects
from .feedback import FeedbackSink, NullFeedback
from .geometry import opposite_direction, point_in, points_equal, random_point, step
from .models import (
    Direction, GameConfig, GameState, GameStateData, GameStats,
    Point, PowerUp, PowerUpType,
)
from .persistence import HighScoreStore, MemoryHighScoreStore
from .scoring import bump_combo, calculate_score, decay_combo, format_time

logger = logging.getLogger(__name__)

# power-up type -> (effect slot, payload)
POWER_UP_EFFECTS = {
    PowerUpType.SPEED_BOOST: ("speed_boost", SPEED_BOOST),
    PowerUpType.SLOW_DOWN: ("slow_down", SLOW_DOWN),
    PowerUpType.DOUBLE_POINTS: ("double_points", EFFECT_DURATION * 1000),
    PowerUpType.SHIELD: ("shield", EFFECT_DURATION * 1000),
}

WALL_COLLISION = "hit the wall"
SELF_COLLISION = "hit itself"


class SnakeGame:
    """Single-player snake simulation driven by a self-rescheduling loop.

    The loop fires every SCHEDULER_INTERVAL seconds on `scheduler` (anything
    with `call_later(delay, callback)`, by default the running asyncio loop)
    and advances the snake once the current effective speed has elapsed.
    All methods must be called from the thread that owns the scheduler.
    """

    def __init__(
        self,
        config: Optional[dict] = None,
        *,
        store: Optional[HighScoreStore] = None,
        feedback: Optional[FeedbackSink] = None,
        scheduler=None,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self.config = GameConfig().merged(config or {})
        self.config.validate()
        self.store = store if store is not None else MemoryHighScoreStore()
        self.feedback = feedback if feedback is not None else NullFeedback()
        self._scheduler = scheduler
        self._clock = clock
        self._rng = rng or random

        self.state = GameState.IDLE
        self.snake: list[Point] = []
        self.direction = Direction.RIGHT
        self.pending_direction = Direction.RIGHT
        self.food = Point(0, 0)
        self.power_up: Optional[PowerUp] = None
        self.stats = GameStats()
        self.effects = ActiveEffects(self._get_scheduler)
        self.game_over_reason: Optional[str] = None
        self._combo = 1.0
        self._loop_handle = None
        self._start_time = 0.0
        self._last_update_time = 0.0
        self._last_poll_time = 0.0
        self._version = 0

        high_score = self.store.load_high_score()
        if high_score is not None:
            self.stats.high_score = high_score
        self.init()

    @property
    def combo(self) -> float:
        return self._combo

    # ── Lifecycle ──────────────────────────────────────────────────

    def init(self):
        self._stop_loop()
        self.state = GameState.IDLE
        row = self.config.grid_size // 2
        self.snake = [Point(INITIAL_HEAD_X - i, row) for i in range(INITIAL_LENGTH)]
        self.direction = Direction.RIGHT
        self.pending_direction = Direction.RIGHT
        self.stats = GameStats(high_score=self.stats.high_score, length=len(self.snake))
        self.effects.clear()
        self.game_over_reason = None
        self._combo = 1.0
        self.power_up = None
        self.spawn_food()
        self._touch()

    def start(self):
        if self.state == GameState.PAUSED:
            self.resume()
            return
        if self.state == GameState.RUNNING:
            return

        self.init()
        self.state = GameState.RUNNING
        now = self._clock()
        self._start_time = now
        self._last_update_time = now
        self._last_poll_time = now
        self._touch()
        logger.info(
            "Game started: difficulty=%s grid=%d wrap_walls=%s power_ups=%s",
            self.config.difficulty.value, self.config.grid_size,
            self.config.wrap_walls, self.config.power_ups,
        )
        self._schedule_loop()

    def pause(self):
        if self.state != GameState.RUNNING:
            return
        self.state = GameState.PAUSED
        self._stop_loop()
        self._touch()
        logger.info("Game paused at score %d", self.stats.score)
        self._notify("on_pause")

    def resume(self):
        if self.state != GameState.PAUSED:
            return
        self.state = GameState.RUNNING
        now = self._clock()
        self._last_update_time = now
        self._last_poll_time = now
        self._touch()
        logger.info("Game resumed")
        self._notify("on_resume")
        self._schedule_loop()

    def toggle_pause(self):
        if self.state == GameState.RUNNING:
            self.pause()
        elif self.state == GameState.PAUSED:
            self.resume()
        else:
            self.start()

    def reset(self):
        self._stop_loop()
        self.init()
        logger.info("Game reset")

    def destroy(self):
        """Stop the loop and cancel outstanding effect expiries."""
        self._stop_loop()
        self.effects.clear()

    # ── Input & configuration ─────────────────────────────────────

    def change_direction(self, direction):
        direction = Direction(direction)
        # A reversal is judged against the committed direction, not the pending one
        if opposite_direction(self.direction) == direction:
            return
        self.pending_direction = direction
        self._touch()

    def update_config(self, changes: dict):
        config = self.config.merged(changes)
        config.validate()
        self.config = config
        self._touch()
        logger.info("Config updated: %s", changes)

    def get_config(self) -> GameConfig:
        return self.config.copy()

    def get_current_speed(self) -> float:
        return self.effects.effective_speed(self.config.speed)

    def get_state(self) -> GameStateData:
        return GameStateData(
            snake=tuple(self.snake),
            direction=self.direction,
            pending_direction=self.pending_direction,
            food=self.food,
            power_up=self.power_up,
            state=self.state,
            stats=self.stats.copy(),
            config=self.config.copy(),
            active_effects=self.effects.as_dict(),
            combo=self._combo,
            game_over_reason=self.game_over_reason,
            version=self._version,
        )

    # ── Loop ──────────────────────────────────────────────────────

    def _get_scheduler(self):
        if self._scheduler is not None:
            return self._scheduler
        return asyncio.get_running_loop()

    def _schedule_loop(self):
        self._loop_handle = self._get_scheduler().call_later(SCHEDULER_INTERVAL, self._scheduler_tick)

    def _stop_loop(self):
        if self._loop_handle is not None:
            self._loop_handle.cancel()
            self._loop_handle = None

    def _scheduler_tick(self):
        self._loop_handle = None
        if self.state != GameState.RUNNING:
            return

        now = self._clock()
        if (now - self._last_update_time) * 1000 >= self.get_current_speed():
            self.tick(now)
            self._last_update_time = now
            if self.state != GameState.RUNNING:
                return

        self.stats.time_elapsed = int((now - self._start_time) * 1000)
        self._combo = decay_combo(self._combo, (now - self._last_poll_time) * 1000)
        self._last_poll_time = now
        self._touch()
        self._schedule_loop()

    def tick(self, now: Optional[float] = None):
        """Advance the snake by one cell and resolve what it lands on."""
        if now is None:
            now = self._clock()

        self.direction = self.pending_direction
        head = step(self.snake[0], self.direction)
        size = self.config.grid_size

        if self.config.wrap_walls:
            head = Point(head.x % size, head.y % size)
        elif not (0 <= head.x < size and 0 <= head.y < size):
            self._collide(WALL_COLLISION)
            return

        if point_in(head, self.snake[1:]):
            self._collide(SELF_COLLISION)
            return

        self.snake.insert(0, head)
        if points_equal(head, self.food):
            self._eat_food()
        elif self.power_up is not None and points_equal(head, self.power_up.position):
            self._eat_power_up()
            self.snake.pop()
        else:
            self.snake.pop()

        if self.config.power_ups and self.power_up is None and self._rng.random() < POWER_UP_CHANCE:
            self.spawn_power_up(now)

        if self.power_up is not None and now > self.power_up.expires_at:
            logger.debug("Power-up %s expired unpicked", self.power_up.type.value)
            self.power_up = None
        self._touch()

    def _collide(self, reason: str):
        if self.effects.shield:
            self.effects.consume("shield")
            if reason == WALL_COLLISION:
                self.direction = opposite_direction(self.direction)
                self.pending_direction = self.direction
            logger.info("Shield absorbed collision: %s", reason)
            self._touch()
            return
        self._game_over(reason)

    def _game_over(self, reason: str):
        self.state = GameState.GAME_OVER
        self.game_over_reason = reason
        self._stop_loop()
        self._touch()
        logger.info(
            "Game over: %s (score %d, length %d, time %s)",
            reason, self.stats.score, len(self.snake), format_time(self.stats.time_elapsed),
        )
        self._notify("on_game_over", reason)

    # ── Pickups ───────────────────────────────────────────────────

    def _eat_food(self):
        multiplier = 2 if self.effects.double_points else 1
        self.stats.score += calculate_score(FOOD_POINTS, multiplier, self._combo)
        self.stats.apples_eaten += 1
        self.stats.length = len(self.snake)
        self._record_high_score()
        self._combo = bump_combo(self._combo)
        self._notify("on_eat")
        self.spawn_food()

    def _eat_power_up(self):
        power_up = self.power_up
        self.stats.power_ups_collected += 1
        self.stats.score += POWER_UP_POINTS
        self._record_high_score()
        slot, payload = POWER_UP_EFFECTS[power_up.type]
        self.effects.arm(slot, payload)
        logger.debug("Collected %s", power_up.type.value)
        self._notify("on_power_up", power_up.type)
        self.power_up = None

    def _record_high_score(self):
        if self.stats.score > self.stats.high_score:
            self.stats.high_score = self.stats.score
            self.store.save_high_score(self.stats.high_score)

    def spawn_food(self):
        size = self.config.grid_size
        occupied = list(self.snake)
        if self.power_up is not None:
            occupied.append(self.power_up.position)
        self.food = random_point(size, size, occupied, self._rng)

    def spawn_power_up(self, now: Optional[float] = None):
        if now is None:
            now = self._clock()
        size = self.config.grid_size
        power_up_type = self._rng.choice(list(PowerUpType))
        self.power_up = PowerUp(
            type=power_up_type,
            position=random_point(size, size, [*self.snake, self.food], self._rng),
            expires_at=now + POWER_UP_LIFETIME,
        )
        logger.debug("Spawned %s at %s", power_up_type.value, self.power_up.position)

    # ── Internals ─────────────────────────────────────────────────

    def _touch(self):
        self._version += 1

    def _notify(self, hook: str, *args):
        try:
            getattr(self.feedback, hook)(*args)
        except Exception:
            logger.exception("Feedback hook %s failed", hook)
