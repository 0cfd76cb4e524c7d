"""Feedback sinks notified by the engine (sound, haptics, client events)."""

import time
from typing import Callable, Protocol

from .models import PowerUpType


class FeedbackSink(Protocol):
    def on_eat(self) -> None: ...

    def on_power_up(self, power_up_type: PowerUpType) -> None: ...

    def on_game_over(self, reason: str) -> None: ...

    def on_pause(self) -> None: ...

    def on_resume(self) -> None: ...

    def on_warning(self) -> None: ...


class NullFeedback:
    def on_eat(self) -> None:
        pass

    def on_power_up(self, power_up_type: PowerUpType) -> None:
        pass

    def on_game_over(self, reason: str) -> None:
        pass

    def on_pause(self) -> None:
        pass

    def on_resume(self) -> None:
        pass

    def on_warning(self) -> None:
        pass


class EventRecorder:
    """Queues events so the server can forward them with the next state frame."""

    def __init__(self, max_events: int = 256, clock: Callable[[], float] = time.time):
        self.max_events = max_events
        self._clock = clock
        self.events: list[dict] = []

    def _record(self, kind: str, **data) -> None:
        self.events.append({"type": kind, "at": self._clock(), **data})
        if len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]

    def on_eat(self) -> None:
        self._record("eat")

    def on_power_up(self, power_up_type: PowerUpType) -> None:
        self._record("power_up", power_up=power_up_type.value)

    def on_game_over(self, reason: str) -> None:
        self._record("game_over", reason=reason)

    def on_pause(self) -> None:
        self._record("pause")

    def on_resume(self) -> None:
        self._record("resume")

    def on_warning(self) -> None:
        self._record("warning")

    def drain(self) -> list[dict]:
        events, self.events = self.events, []
        return events
