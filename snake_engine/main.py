"""FastAPI application: HTTP routes, WebSocket endpoint, state broadcast loop."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from .connection_manager import (
    ConnectionManager, build_ack_msg, build_state_msg, build_welcome_msg,
    config_to_dict, snapshot_to_dict,
)
from .constants import FRAME_RATE, HIGH_SCORE_PATH, HOST, LOG_LEVEL, PORT
from .feedback import EventRecorder
from .game import SnakeGame
from .models import Difficulty, Direction, InvalidConfigError
from .persistence import JsonHighScoreStore

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


class ConfigUpdate(BaseModel):
    grid_size: Optional[int] = Field(default=None, ge=1)
    speed: Optional[float] = Field(default=None, gt=0)
    difficulty: Optional[Difficulty] = None
    wrap_walls: Optional[bool] = None
    power_ups: Optional[bool] = None


class DirectionRequest(BaseModel):
    direction: Direction


def build_game() -> SnakeGame:
    return SnakeGame(store=JsonHighScoreStore(HIGH_SCORE_PATH), feedback=EventRecorder())


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(broadcast_loop())
    logger.info("Snake engine ready (high score %d)", game.stats.high_score)
    yield
    task.cancel()
    game.destroy()


app = FastAPI(lifespan=lifespan)
game = build_game()
manager = ConnectionManager()


def drain_events() -> list[dict]:
    drain = getattr(game.feedback, "drain", None)
    return drain() if drain else []


def apply_config(changes: dict) -> None:
    try:
        game.update_config(changes)
    except InvalidConfigError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/api/state")
async def get_state():
    return snapshot_to_dict(game.get_state())


@app.get("/api/config")
async def get_config():
    return config_to_dict(game.get_config())


@app.patch("/api/config")
async def patch_config(update: ConfigUpdate):
    apply_config(update.model_dump(exclude_none=True))
    return config_to_dict(game.get_config())


@app.post("/api/start")
async def start():
    game.start()
    return snapshot_to_dict(game.get_state())


@app.post("/api/pause")
async def pause():
    game.pause()
    return snapshot_to_dict(game.get_state())


@app.post("/api/resume")
async def resume():
    game.resume()
    return snapshot_to_dict(game.get_state())


@app.post("/api/reset")
async def reset():
    game.reset()
    return snapshot_to_dict(game.get_state())


@app.post("/api/direction")
async def change_direction(req: DirectionRequest):
    game.change_direction(req.direction)
    return snapshot_to_dict(game.get_state())


COMMANDS = {
    "start": lambda: game.start(),
    "pause": lambda: game.toggle_pause(),
    "reset": lambda: game.reset(),
}


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)
    try:
        await manager.send_personal(ws, build_welcome_msg(game.get_state()))
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
                kind = msg["type"]
            except (ValueError, KeyError, TypeError):
                logger.debug("Ignoring malformed message: %r", raw[:200])
                continue
            if not isinstance(kind, str):
                continue

            if kind == "input":
                d = msg.get("direction")
                if isinstance(d, str) and d in Direction.__members__:
                    game.change_direction(Direction(d))
            elif kind in COMMANDS:
                COMMANDS[kind]()
                await manager.send_personal(ws, build_ack_msg(kind, game.get_state()))
            elif kind == "config":
                changes = {k: v for k, v in msg.items() if k != "type"}
                error = None
                try:
                    game.update_config(changes)
                except InvalidConfigError as exc:
                    error = str(exc)
                await manager.send_personal(ws, build_ack_msg(kind, game.get_state(), error))
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)


async def broadcast_loop():
    last_version = None
    while True:
        snapshot = game.get_state()
        if manager.connections and snapshot.version != last_version:
            await manager.broadcast(build_state_msg(snapshot, drain_events()))
            last_version = snapshot.version
        await asyncio.sleep(1 / FRAME_RATE)


if __name__ == "__main__":
    import uvicorn
    logger.info("Snake engine starting on http://%s:%d", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)
