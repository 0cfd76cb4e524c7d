import random

import pytest

from snake_engine.feedback import EventRecorder
from snake_engine.game import SnakeGame
from snake_engine.persistence import MemoryHighScoreStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeHandle:
    def __init__(self, when: float, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Stands in for an asyncio loop: callbacks only run when time is advanced."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback) -> FakeHandle:
        handle = FakeHandle(self.clock.now + delay, callback)
        self.handles.append(handle)
        return handle

    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.clock.now + seconds
        while True:
            due = [h for h in self.handles if not h.cancelled and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            self.clock.now = max(self.clock.now, handle.when)
            handle.callback()
        self.clock.now = target


class ForcedRandom(random.Random):
    """Seeded RNG whose `random()` can be pinned to force or suppress power-up spawns."""

    def __init__(self, seed: int = 7, roll=None):
        super().__init__(seed)
        self.roll = roll

    def random(self) -> float:
        if self.roll is not None:
            return self.roll
        return super().random()

    # Defining getrandbits here keeps randrange/choice off the pinned random();
    # Random.__init_subclass__ would otherwise route _randbelow through it.
    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler(clock: FakeClock) -> FakeScheduler:
    return FakeScheduler(clock)


@pytest.fixture()
def recorder(clock: FakeClock) -> EventRecorder:
    return EventRecorder(clock=clock)


@pytest.fixture()
def store() -> MemoryHighScoreStore:
    return MemoryHighScoreStore()


@pytest.fixture()
def rng() -> ForcedRandom:
    # 0.99 never passes the 5% spawn roll
    return ForcedRandom(roll=0.99)


@pytest.fixture()
def make_game(clock, scheduler, recorder, store, rng):
    def _make(**config) -> SnakeGame:
        return SnakeGame(
            config,
            store=store,
            feedback=recorder,
            scheduler=scheduler,
            clock=clock,
            rng=rng,
        )

    return _make


@pytest.fixture()
def game(make_game) -> SnakeGame:
    return make_game()
