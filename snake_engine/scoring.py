"""Score and combo arithmetic."""

import math

from .constants import COMBO_DECAY_MS, COMBO_STEP, MAX_COMBO


def calculate_score(base_points: int, multiplier: int, combo: float = 1) -> int:
    return math.floor(base_points * multiplier * combo)


def bump_combo(combo: float) -> float:
    return min(combo + COMBO_STEP, MAX_COMBO)


def decay_combo(combo: float, elapsed_ms: float) -> float:
    """Pull the combo back toward 1 by one point per COMBO_DECAY_MS."""
    if combo <= 1:
        return combo
    return max(1, combo - elapsed_ms / COMBO_DECAY_MS)


def format_time(ms: float) -> str:
    seconds = int(ms // 1000)
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"
