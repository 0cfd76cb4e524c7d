"""Data models."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import NamedTuple, Optional

from .constants import DEFAULT_DIFFICULTY, DIFFICULTY_SPEEDS, GRID_SIZE, MIN_GRID_SIZE


class Direction(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class GameState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    GAME_OVER = "GAME_OVER"


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    EXTREME = "EXTREME"

    @property
    def speed(self) -> int:
        return DIFFICULTY_SPEEDS[self.value]


class PowerUpType(str, Enum):
    SPEED_BOOST = "SPEED_BOOST"
    SLOW_DOWN = "SLOW_DOWN"
    DOUBLE_POINTS = "DOUBLE_POINTS"
    SHIELD = "SHIELD"


class Point(NamedTuple):
    x: int
    y: int


class InvalidConfigError(ValueError):
    """Raised when a configuration value is outside what the engine can run."""


@dataclass
class GameConfig:
    grid_size: int = GRID_SIZE
    speed: float = DIFFICULTY_SPEEDS[DEFAULT_DIFFICULTY]
    difficulty: Difficulty = Difficulty(DEFAULT_DIFFICULTY)
    wrap_walls: bool = False
    power_ups: bool = True

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def copy(self) -> "GameConfig":
        return replace(self)

    def merged(self, changes: dict) -> "GameConfig":
        """Return a copy with `changes` applied.

        Supplying a difficulty without a speed re-derives the speed from the
        difficulty table, discarding any custom speed.
        """
        unknown = set(changes) - self.field_names()
        if unknown:
            raise InvalidConfigError(f"unknown config keys: {sorted(unknown)}")
        changes = dict(changes)
        if changes.get("difficulty") is not None:
            try:
                changes["difficulty"] = Difficulty(changes["difficulty"])
            except ValueError:
                raise InvalidConfigError(f"unknown difficulty: {changes['difficulty']!r}") from None
            if changes.get("speed") is None:
                changes["speed"] = changes["difficulty"].speed
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)

    def validate(self) -> None:
        if isinstance(self.grid_size, bool) or not isinstance(self.grid_size, int):
            raise InvalidConfigError(f"grid_size must be an integer, got {self.grid_size!r}")
        if self.grid_size < MIN_GRID_SIZE:
            raise InvalidConfigError(f"grid_size must be at least {MIN_GRID_SIZE}, got {self.grid_size}")
        if not isinstance(self.speed, (int, float)) or self.speed <= 0:
            raise InvalidConfigError(f"speed must be a positive number of ms, got {self.speed!r}")


@dataclass
class GameStats:
    score: int = 0
    high_score: int = 0
    length: int = 0
    time_elapsed: int = 0
    apples_eaten: int = 0
    power_ups_collected: int = 0

    def copy(self) -> "GameStats":
        return replace(self)


@dataclass(frozen=True)
class PowerUp:
    type: PowerUpType
    position: Point
    expires_at: float


@dataclass(frozen=True)
class GameStateData:
    """Read-only snapshot handed to renderers once per frame."""

    snake: tuple[Point, ...]
    direction: Direction
    pending_direction: Direction
    food: Point
    power_up: Optional[PowerUp]
    state: GameState
    stats: GameStats
    config: GameConfig
    active_effects: dict = field(default_factory=dict)
    combo: float = 1.0
    game_over_reason: Optional[str] = None
    version: int = 0
