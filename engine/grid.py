"""Room grid helpers: bounds, lookups, staircase search, reachability."""

from __future__ import annotations

from typing import TYPE_CHECKING

from config import TILES_IN_ROW
from engine.errors import TowerIntegrityError
from engine.rules import can_defeat
from models.player import Position
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

if TYPE_CHECKING:
    from models.player import PlayerState
    from models.tables import StaircaseDirection
    from models.tiles import Tile
    from models.tower import Room


def in_bounds(line: int, column: int) -> bool:
    """Check if coordinates fall inside a room."""
    return 0 <= line < TILES_IN_ROW and 0 <= column < TILES_IN_ROW


def count_starting_positions(rooms: list[Room]) -> int:
    return sum(
        1
        for room in rooms
        for line in room.tiles
        for tile in line
        if isinstance(tile, StartingPositionTile)
    )


def find_starting_position(rooms: list[Room]) -> Position:
    """Locate the starting position and consume it.

    The starting tile is replaced with an empty tile.

    Args:
        rooms: The standard rooms of a tower (mutated in place).

    Returns:
        The position the player starts at.

    Raises:
        TowerIntegrityError: If no room holds a starting position.
    """
    for room_index, room in enumerate(rooms):
        for line_index, line in enumerate(room.tiles):
            for column_index, tile in enumerate(line):
                if isinstance(tile, StartingPositionTile):
                    line[column_index] = EMPTY_TILE
                    return Position(room=room_index, line=line_index, column=column_index)
    raise TowerIntegrityError("No starting position found")


def find_staircase_position(
    rooms: list[Room],
    room_index: int,
    direction: StaircaseDirection,
) -> Position:
    """Find the first staircase of a given direction in a room.

    Raises:
        TowerIntegrityError: If the room has no such staircase.
    """
    room = rooms[room_index]
    for line_index, line in enumerate(room.tiles):
        for column_index, tile in enumerate(line):
            if isinstance(tile, StaircaseTile) and tile.direction == direction:
                return Position(room=room_index, line=line_index, column=column_index)
    raise TowerIntegrityError(
        f"No {direction.value} staircase found in room {room_index} ({room.name})"
    )


def is_enterable(tile: Tile, player: PlayerState) -> bool:
    """Whether the player could currently step onto a tile.

    Uses the same key and combat checks as move resolution, without
    changing anything.
    """
    match tile:
        case WallTile():
            return False
        case DoorTile(color=color):
            return player.inventory.has_key(color)
        case EnemyTile(enemy=enemy):
            return can_defeat(player, enemy)
        case EmptyTile() | StartingPositionTile() | KeyTile() | ItemTile() | StaircaseTile() | ScoreTile():
            return True
    raise TypeError(f"Unknown tile: {tile!r}")


def reachable_tiles(rooms: list[Room], player: PlayerState) -> list[list[bool]]:
    """Compute which cells of the player's current room can be entered.

    Args:
        rooms: The standard rooms of the tower.
        player: The current player state.

    Returns:
        A TILES_IN_ROW x TILES_IN_ROW grid of booleans, indexed [line][column].
    """
    room = rooms[player.position.room]
    return [
        [is_enterable(tile, player) for tile in line]
        for line in room.tiles
    ]
