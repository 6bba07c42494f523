"""Move submission, reachability, state and log endpoints."""

import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from pydantic import TypeAdapter

from api.tower import get_game
from api.ws import notify_actions
from config import TILES_IN_ROW
from engine.errors import TowerIntegrityError
from engine.exporter import export_tile
from engine.grid import in_bounds, is_enterable
from engine.play import current_reachability, resolve_move
from models.actions import Action, MoveRequest, MovesRequest, MovesResult
from models.tiles import describe_tile

router = APIRouter()
logger = logging.getLogger(__name__)

_ACTIONS = TypeAdapter(list[Action])


@router.get("/state")
def get_game_state(request: Request) -> dict:
    """Player position, stats, inventory and the room they stand in."""
    with request.app.state.lock:
        game_state = get_game(request)
        player = game_state.player
        room = game_state.tower.standard_rooms[player.position.room]
        return {
            "tower": game_state.tower.name,
            "room_name": room.name,
            "player": player.model_dump(mode="json"),
            "tiles": [[export_tile(tile) for tile in line] for line in room.tiles],
            "scores": [marker.model_dump(mode="json") for marker in room.scores],
            "tiles_in_row": TILES_IN_ROW,
        }


@router.get("/tile/{line}/{column}")
def get_tile(line: int, column: int, request: Request) -> dict:
    """What sits on one cell of the current room, for tooltips and cursors."""
    if not in_bounds(line, column):
        raise HTTPException(status_code=404, detail=f"Cell ({line}, {column}) is out of bounds")
    with request.app.state.lock:
        game_state = get_game(request)
        room = game_state.tower.standard_rooms[game_state.player.position.room]
        tile = room.tiles[line][column]
        score = room.score_at(line, column)
        return {
            "tile": export_tile(tile),
            "tooltip": describe_tile(tile),
            "reachable": is_enterable(tile, game_state.player),
            "score": score.value if score is not None else None,
        }


@router.post("/move", response_model=Action)
def submit_move(move: MoveRequest, request: Request, background_tasks: BackgroundTasks) -> Action:
    """Resolve a single step. A blocked step answers 409 and changes nothing."""
    with request.app.state.lock:
        game_state = get_game(request)
        try:
            action = resolve_move(game_state, move.direction)
        except TowerIntegrityError as e:
            logger.error("Tower integrity failure: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
    if action is None:
        raise HTTPException(status_code=409, detail="Move rejected")

    background_tasks.add_task(notify_actions, [action.model_dump(mode="json")])
    return action


@router.post("/moves", response_model=MovesResult)
def submit_moves(moves: MovesRequest, request: Request, background_tasks: BackgroundTasks) -> MovesResult:
    """Queue a burst of steps and resolve them in order.

    The first blocked step discards the rest of the burst.
    """
    with request.app.state.lock:
        game_state = get_game(request)
        buffer = request.app.state.buffer
        for direction in moves.directions:
            buffer.push(direction)
        try:
            result = buffer.drain(game_state)
        except TowerIntegrityError as e:
            buffer.clear()
            logger.error("Tower integrity failure: %s", e)
            raise HTTPException(status_code=500, detail=str(e))

    background_tasks.add_task(notify_actions, _ACTIONS.dump_python(result.actions, mode="json"))
    return result


@router.get("/reachability")
def get_reachability(request: Request) -> list[list[bool]]:
    """Which cells of the current room can be entered right now."""
    with request.app.state.lock:
        return current_reachability(get_game(request))


@router.get("/log")
def get_game_log(request: Request) -> list[dict]:
    """Every action committed since the game started."""
    with request.app.state.lock:
        game_state = get_game(request)
        return _ACTIONS.dump_python(game_state.action_log, mode="json")
