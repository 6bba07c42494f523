"""Tower import/export and session start endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, HTTPException, Request
from pydantic import BaseModel

from api.ws import notify_game_started
from engine.errors import TowerIntegrityError
from engine.exporter import export_tower
from engine.importer import import_tower
from engine.play import MoveBuffer, save_game, start_game
from models.game_state import GameState

router = APIRouter()
logger = logging.getLogger(__name__)


class ImportResponse(BaseModel):
    """Response after importing a tower and starting a game on it."""
    name: str
    errors: list[str]               # Warnings the tower was accepted with
    standard_rooms: int
    nexus_rooms: int
    enemies: int


def save_snapshot(game_state: GameState, save_file: str) -> bool:
    """Write the game snapshot, logging instead of raising on I/O failure.

    Returns:
        True if the snapshot was written.
    """
    try:
        save_game(game_state, save_file)
    except OSError as e:
        logger.error("Failed to save snapshot to %s: %s", save_file, e)
        return False
    return True


def install_game(request_app: Any, game_state: GameState) -> None:
    """Make a game the live session and save it after every committed action."""
    save_file = request_app.state.save_file

    def _save(_action: Any) -> None:
        save_snapshot(game_state, save_file)

    game_state.subscribe(_save)
    request_app.state.game = game_state
    request_app.state.buffer = MoveBuffer()


def get_game(request: Request) -> GameState:
    """Get the live game from app state."""
    game_state = request.app.state.game
    if game_state is None:
        raise HTTPException(status_code=404, detail="No tower loaded")
    return game_state


@router.post("/import", response_model=ImportResponse)
def import_tower_record(
    request: Request,
    background_tasks: BackgroundTasks,
    record: dict[str, Any] = Body(...),
) -> ImportResponse:
    """Import a tower record and start a fresh game on it.

    Import problems are returned as warnings as long as the tower is still
    playable; otherwise the request fails with every error found.
    """
    result = import_tower(record)
    try:
        game_state = start_game(result.tower)
    except TowerIntegrityError as e:
        raise HTTPException(status_code=422, detail={"errors": result.errors + [str(e)]})

    with request.app.state.lock:
        install_game(request.app, game_state)
        save_snapshot(game_state, request.app.state.save_file)
    background_tasks.add_task(notify_game_started, game_state.tower.name)

    tower = game_state.tower
    return ImportResponse(
        name=tower.name,
        errors=result.errors,
        standard_rooms=len(tower.standard_rooms),
        nexus_rooms=len(tower.nexus_rooms),
        enemies=len(tower.enemies),
    )


@router.get("/export")
def export_tower_record(request: Request) -> dict:
    """Export the live tower, including everything picked up or defeated so far."""
    with request.app.state.lock:
        game_state = get_game(request)
        return export_tower(game_state.tower)
