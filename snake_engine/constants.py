"""Game constants."""

import os
from pathlib import Path

GRID_SIZE = 20
MIN_GRID_SIZE = 8
INITIAL_LENGTH = 3
INITIAL_HEAD_X = 5

DIFFICULTY_SPEEDS = {
    "EASY": 200,
    "MEDIUM": 150,
    "HARD": 100,
    "EXTREME": 60,
}
DEFAULT_DIFFICULTY = "MEDIUM"

FOOD_POINTS = 10
POWER_UP_POINTS = 50
COMBO_STEP = 0.1
MAX_COMBO = 5
COMBO_DECAY_MS = 10000

POWER_UP_CHANCE = 0.05
POWER_UP_LIFETIME = 10.0
EFFECT_DURATION = 5.0
SPEED_BOOST = 1.5
SLOW_DOWN = 0.7

MAX_PLACEMENT_ATTEMPTS = 100
SCHEDULER_INTERVAL = 0.016

DIRECTIONS = {
    "UP": (0, -1),
    "DOWN": (0, 1),
    "LEFT": (-1, 0),
    "RIGHT": (1, 0),
}
OPPOSITES = {"UP": "DOWN", "DOWN": "UP", "LEFT": "RIGHT", "RIGHT": "LEFT"}

# Process settings
HOST = os.environ.get("SNAKE_HOST", "0.0.0.0")
PORT = int(os.environ.get("SNAKE_PORT", "8765"))
HIGH_SCORE_PATH = Path(
    os.environ.get("SNAKE_HIGH_SCORE_PATH", Path.home() / ".snake_engine" / "high_score.json")
)
LOG_LEVEL = os.environ.get("SNAKE_LOG_LEVEL", "INFO").upper()
FRAME_RATE = int(os.environ.get("SNAKE_FRAME_RATE", "30"))
