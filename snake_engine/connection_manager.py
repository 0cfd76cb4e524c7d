"""WebSocket connection management and state serialization."""

import json
import logging
from dataclasses import asdict
from typing import Optional

from fastapi import WebSocket

from .models import GameConfig, GameStateData
from .scoring import format_time

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.connections: set[WebSocket] = set()

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.connections.add(ws)
        logger.info("Client connected (%d total)", len(self.connections))

    def disconnect(self, ws: WebSocket):
        self.connections.discard(ws)
        logger.info("Client disconnected (%d total)", len(self.connections))

    async def broadcast(self, message: str):
        disconnected = []
        for ws in list(self.connections):
            try:
                await ws.send_text(message)
            except Exception:
                disconnected.append(ws)
        for ws in disconnected:
            self.connections.discard(ws)
        if disconnected:
            logger.debug("Dropped %d dead connections", len(disconnected))

    async def send_personal(self, ws: WebSocket, message: str):
        await ws.send_text(message)


def point_to_list(point) -> list[int]:
    return [point.x, point.y]


def config_to_dict(config: GameConfig) -> dict:
    data = asdict(config)
    data["difficulty"] = config.difficulty.value
    return data


def snapshot_to_dict(snapshot: GameStateData) -> dict:
    power_up = None
    if snapshot.power_up is not None:
        power_up = {
            "type": snapshot.power_up.type.value,
            "position": point_to_list(snapshot.power_up.position),
            "expires_at": snapshot.power_up.expires_at,
        }
    stats = asdict(snapshot.stats)
    stats["time_label"] = format_time(snapshot.stats.time_elapsed)
    return {
        "version": snapshot.version,
        "state": snapshot.state.value,
        "snake": [point_to_list(p) for p in snapshot.snake],
        "direction": snapshot.direction.value,
        "pending_direction": snapshot.pending_direction.value,
        "food": point_to_list(snapshot.food),
        "power_up": power_up,
        "stats": stats,
        "config": config_to_dict(snapshot.config),
        "active_effects": dict(snapshot.active_effects),
        "combo": round(snapshot.combo, 3),
        "game_over_reason": snapshot.game_over_reason,
    }


def build_state_msg(snapshot: GameStateData, events: Optional[list[dict]] = None) -> str:
    return json.dumps({
        "type": "state",
        "game": snapshot_to_dict(snapshot),
        "events": events or [],
    })


def build_welcome_msg(snapshot: GameStateData) -> str:
    return json.dumps({
        "type": "welcome",
        "config": config_to_dict(snapshot.config),
        "game": snapshot_to_dict(snapshot),
    })


def build_ack_msg(command: str, snapshot: GameStateData, error: Optional[str] = None) -> str:
    msg = {"type": "ack", "command": command, "game": snapshot_to_dict(snapshot)}
    if error:
        msg["error"] = error
    return json.dumps(msg)
