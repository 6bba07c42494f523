"""Move resolution: game creation, one step at a time, snapshots."""

from __future__ import annotations

import json
import logging
import os
from collections import deque
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from engine.errors import SnapshotLoadError, TowerIntegrityError
from engine.exporter import export_tower
from engine.grid import (
    count_starting_positions,
    find_staircase_position,
    find_starting_position,
    in_bounds,
    reachable_tiles,
)
from engine.importer import import_tower
from engine.rules import apply_item, apply_level_ups, drop_tile, evaluate_fight
from models.actions import (
    Action,
    Direction,
    KillEnemy,
    MovesResult,
    OpenDoor,
    PickItem,
    PickKey,
    PlayerMove,
    UseStaircase,
)
from models.game_state import GameState
from models.player import PlayerState, Position
from models.tables import StaircaseDirection
from models.tiles import (
    EMPTY_TILE,
    DoorTile,
    EmptyTile,
    EnemyTile,
    ItemTile,
    KeyTile,
    ScoreTile,
    StaircaseTile,
    StartingPositionTile,
    WallTile,
)
from models.tower import Tower

logger = logging.getLogger(__name__)

_ACTION_LOG = TypeAdapter(list[Action])


def start_game(tower: Tower) -> GameState:
    """Start a session on a tower.

    The starting position tile is consumed (replaced with an empty tile)
    and becomes the player's position.

    Args:
        tower: The tower to play (mutated in place from now on).

    Returns:
        A fresh GameState.

    Raises:
        TowerIntegrityError: If the tower has no standard rooms or not
            exactly one starting position.
    """
    if not tower.standard_rooms:
        raise TowerIntegrityError("Tower has no standard rooms")
    starts = count_starting_positions(tower.standard_rooms)
    if starts != 1:
        raise TowerIntegrityError(f"Expected exactly one starting position, found {starts}")

    position = find_starting_position(tower.standard_rooms)
    player = PlayerState.from_starting_stats(position, tower.starting_stats)
    logger.info(
        "Game started in tower %r at room %d (%d, %d)",
        tower.name,
        position.room,
        position.line,
        position.column,
    )
    return GameState(tower=tower, player=player)


def resolve_move(game_state: GameState, direction: Direction) -> Action | None:
    """Resolve one step of the player and apply it.

    Exactly one of the following happens: the step is rejected (None is
    returned and nothing changes), or the matching action is committed to
    the tower and player, logged, and sent to subscribers.

    Args:
        game_state: Current game state (mutated in place).
        direction: The requested step.

    Returns:
        The committed action, or None if the step is not allowed.

    Raises:
        TowerIntegrityError: If the tower content is inconsistent (enemy not
            in the roster, unknown drop, unpaired staircase).
    """
    tower = game_state.tower
    player = game_state.player
    start = player.position

    if not 0 <= start.room < len(tower.standard_rooms):
        raise TowerIntegrityError(f"Player is in unknown room {start.room}")

    delta_line, delta_column = direction.delta
    line, column = start.line + delta_line, start.column + delta_column
    if not in_bounds(line, column):
        logger.debug("Move %s rejected: (%d, %d) is out of bounds", direction.value, line, column)
        return None

    room = tower.standard_rooms[start.room]
    tile = room.tiles[line][column]
    target = Position(room=start.room, line=line, column=column)

    action: Action
    match tile:
        case EmptyTile() | StartingPositionTile() | ScoreTile():
            action = PlayerMove(player=start, target=target)

        case WallTile():
            logger.debug("Move %s rejected: wall at (%d, %d)", direction.value, line, column)
            return None

        case KeyTile(color=color):
            player.inventory.add_key(color)
            room.tiles[line][column] = EMPTY_TILE
            action = PickKey(player=start, target=target, color=color)

        case ItemTile(item=item):
            apply_item(player, item)
            room.tiles[line][column] = EMPTY_TILE
            action = PickItem(player=start, target=target, item=item)

        case DoorTile(color=color):
            if not player.inventory.has_key(color):
                logger.debug("Move %s rejected: no %s key", direction.value, color.value)
                return None
            player.inventory.use_key(color)
            room.tiles[line][column] = EMPTY_TILE
            action = OpenDoor(player=start, target=target, color=color)

        case EnemyTile(enemy=enemy):
            if not tower.has_enemy(enemy):
                raise TowerIntegrityError(
                    f"Enemy {enemy.name!r} at room {start.room} ({line}, {column}) is not in the roster"
                )
            outcome = evaluate_fight(player, enemy)
            if not outcome.win:
                logger.debug("Move %s rejected: cannot defeat %r", direction.value, enemy.name)
                return None
            dropped = drop_tile(enemy)
            exp_gained = enemy.exp or 0
            player.hp -= outcome.damage
            player.exp += exp_gained
            apply_level_ups(player, tower.levels)
            room.tiles[line][column] = dropped
            action = KillEnemy(
                player=start,
                target=target,
                enemy_name=enemy.name,
                drop_tile=dropped,
                damage_taken=outcome.damage,
                exp_gained=exp_gained,
            )

        case StaircaseTile(direction=staircase):
            destination = _staircase_destination(tower, start.room, staircase)
            if destination is None:
                logger.debug("Move %s rejected: staircase %s leads nowhere", direction.value, staircase.value)
                return None
            action = UseStaircase(player=start, target=target, destination=destination)

        case _:
            raise TypeError(f"Unknown tile: {tile!r}")

    if isinstance(action, UseStaircase):
        player.position = action.destination
    else:
        player.position = target
    _commit(game_state, action)
    return action


def _staircase_destination(
    tower: Tower,
    room_index: int,
    staircase: StaircaseDirection,
) -> Position | None:
    """Where a staircase leads: the paired staircase of the next room.

    Going up leads to the following standard room, going down to the
    previous one. Returns None when there is no such room.
    """
    if staircase == StaircaseDirection.UP:
        destination_room, paired = room_index + 1, StaircaseDirection.DOWN
    else:
        destination_room, paired = room_index - 1, StaircaseDirection.UP
    if not 0 <= destination_room < len(tower.standard_rooms):
        return None
    return find_staircase_position(tower.standard_rooms, destination_room, paired)


def _commit(game_state: GameState, action: Action) -> None:
    game_state.action_log.append(action)
    logger.debug("Committed %s -> %s", action.kind().value, action.target)
    game_state.notify(action)


def current_reachability(game_state: GameState) -> list[list[bool]]:
    """Which cells of the player's room can be entered right now."""
    return reachable_tiles(game_state.tower.standard_rooms, game_state.player)


class MoveBuffer:
    """FIFO of requested steps, resolved one at a time.

    A rejected step clears everything still queued, so a burst of input
    cannot pile the player up against an obstacle.
    """

    def __init__(self) -> None:
        self._pending: deque[Direction] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def push(self, direction: Direction) -> None:
        self._pending.append(direction)

    def clear(self) -> None:
        self._pending.clear()

    def drain(self, game_state: GameState) -> MovesResult:
        """Resolve queued steps in order until empty or one is rejected."""
        actions: list[Action] = []
        while self._pending:
            direction = self._pending.popleft()
            action = resolve_move(game_state, direction)
            if action is None:
                dropped = len(self._pending)
                self._pending.clear()
                if dropped:
                    logger.debug("Dropped %d queued move(s) after rejection", dropped)
                return MovesResult(actions=actions, rejected=True)
            actions.append(action)
        return MovesResult(actions=actions, rejected=False)


def save_game(game_state: GameState, path: str) -> None:
    """Persist a game snapshot to a JSON file.

    Writes to a temporary file first, then renames for atomicity.

    Args:
        game_state: The game state to save.
        path: File path to write to.
    """
    tmp_path = path + ".tmp"
    data = {
        "tower": export_tower(game_state.tower),
        "player": game_state.player.model_dump(mode="json"),
        "action_log": _ACTION_LOG.dump_python(game_state.action_log, mode="json"),
    }
    with open(tmp_path, "w") as f:
        json.dump(data, f)
    os.replace(tmp_path, path)


def load_game(path: str) -> GameState | None:
    """Load a game snapshot from a JSON file.

    Args:
        path: File path to read from.

    Returns:
        The loaded GameState, or None if the file doesn't exist.

    Raises:
        SnapshotLoadError: If the file exists but cannot be restored.
    """
    if not Path(path).exists():
        return None
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise SnapshotLoadError(f"Unable to read snapshot {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotLoadError(f"Snapshot {path} is not an object")

    result = import_tower(data.get("tower"), require_start=False, report_duplicates=False)
    if result.errors:
        raise SnapshotLoadError(f"Snapshot {path} has an invalid tower: {'; '.join(result.errors)}")
    try:
        player = PlayerState.model_validate(data.get("player"))
        action_log = _ACTION_LOG.validate_python(data.get("action_log", []))
    except ValidationError as exc:
        raise SnapshotLoadError(f"Snapshot {path} has an invalid player: {exc}") from exc
    return GameState(tower=result.tower, player=player, action_log=action_log)
