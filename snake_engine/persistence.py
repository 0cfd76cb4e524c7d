"""High score persistence."""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    def load_high_score(self) -> Optional[int]: ...

    def save_high_score(self, value: int) -> None: ...


class MemoryHighScoreStore:
    def __init__(self, value: Optional[int] = None):
        self.value = value
        self.saves: list[int] = []

    def load_high_score(self) -> Optional[int]:
        return self.value

    def save_high_score(self, value: int) -> None:
        self.value = value
        self.saves.append(value)


class JsonHighScoreStore:
    """Keeps the high score in a small JSON document: {"high_score": 120}."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_high_score(self) -> Optional[int]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text())
            return int(data["high_score"])
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable high score file %s: %s", self.path, exc)
            return None

    def save_high_score(self, value: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"high_score": value}))
        except OSError as exc:
            logger.warning("Could not save high score to %s: %s", self.path, exc)
