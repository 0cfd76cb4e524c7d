"""Time-limited power-up effects.

Each slot is either absent (None) or holds a payload: a speed factor for
speed_boost / slow_down, the armed duration in ms for double_points / shield.
Arming a slot schedules a one-shot wall-clock expiry. Expiries are not tied to
the game loop, so pausing does not extend an effect, but `clear()` cancels
them and bumps the generation so a stale expiry can never touch a new game.
"""

import logging
from typing import Callable, Optional

from .constants import EFFECT_DURATION

logger = logging.getLogger(__name__)

SLOTS = ("speed_boost", "slow_down", "double_points", "shield")


class ActiveEffects:
    def __init__(self, scheduler_factory: Callable[[], object], duration: float = EFFECT_DURATION):
        self._scheduler_factory = scheduler_factory
        self.duration = duration
        self.generation = 0
        self._values: dict[str, float] = {}
        self._handles: dict[str, object] = {}

    def get(self, slot: str) -> Optional[float]:
        return self._values.get(slot)

    def is_active(self, slot: str) -> bool:
        return slot in self._values

    @property
    def speed_boost(self) -> Optional[float]:
        return self._values.get("speed_boost")

    @property
    def slow_down(self) -> Optional[float]:
        return self._values.get("slow_down")

    @property
    def double_points(self) -> Optional[float]:
        return self._values.get("double_points")

    @property
    def shield(self) -> Optional[float]:
        return self._values.get("shield")

    def arm(self, slot: str, payload: float) -> None:
        if slot not in SLOTS:
            raise KeyError(slot)
        previous = self._handles.pop(slot, None)
        if previous is not None:
            previous.cancel()
        self._values[slot] = payload
        generation = self.generation
        self._handles[slot] = self._scheduler_factory().call_later(
            self.duration, lambda: self._expire(slot, generation)
        )

    def consume(self, slot: str) -> None:
        """Drop a slot early (a shield absorbing a hit). Its timer is cancelled."""
        self._values.pop(slot, None)
        handle = self._handles.pop(slot, None)
        if handle is not None:
            handle.cancel()

    def _expire(self, slot: str, generation: int) -> None:
        if generation != self.generation:
            return
        self._handles.pop(slot, None)
        if self._values.pop(slot, None) is not None:
            logger.debug("Effect %s expired", slot)

    def clear(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        self._values.clear()
        self.generation += 1

    def effective_speed(self, base_speed: float) -> float:
        speed = base_speed
        if self.speed_boost:
            speed = speed / self.speed_boost
        if self.slow_down:
            speed = speed * self.slow_down
        return speed

    def as_dict(self) -> dict[str, float]:
        return dict(self._values)
