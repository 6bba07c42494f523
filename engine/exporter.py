"""Tower -> persisted record conversion. Read-only, no validation."""

from __future__ import annotations

import json
from typing import Any

from models.enemies import Enemy
from models.tiles import (
    DoorTile,
    EmptyTile,
    EnemyTile,
    ItemTile,
    KeyTile,
    ScoreTile,
    StaircaseTile,
    StartingPositionTile,
    Tile,
    WallTile,
)
from models.tower import LevelDef, Room, StartingStats, Tower


def export_tile(tile: Tile) -> dict[str, Any]:
    """Record for one tile: its tag plus the fields that tag needs."""
    match tile:
        case DoorTile(color=color) | KeyTile(color=color):
            return {"type": tile.kind().value, "color": color.value}
        case ItemTile(item=item):
            return {"type": tile.kind().value, "name": item.value}
        case EnemyTile(enemy=enemy):
            return {
                "type": tile.kind().value,
                "enemyType": enemy.type.value if enemy.type is not None else None,
                "enemyLevel": enemy.level,
            }
        case StaircaseTile(direction=direction):
            return {"type": tile.kind().value, "direction": direction.value}
        case ScoreTile(score=score):
            return {"type": tile.kind().value, "score": score.value}
        case EmptyTile() | WallTile() | StartingPositionTile():
            return {"type": tile.kind().value}
    raise TypeError(f"Unknown tile: {tile!r}")


def export_room(room: Room) -> dict[str, Any]:
    return {
        "name": room.name,
        "tiles": [[export_tile(tile) for tile in line] for line in room.tiles],
        "scores": [
            {"line": s.line, "column": s.column, "type": s.type.value}
            for s in room.scores
        ],
    }


def export_enemy(enemy: Enemy) -> dict[str, Any]:
    return {
        "type": enemy.type.value if enemy.type is not None else None,
        "level": enemy.level,
        "name": enemy.name,
        "hp": enemy.hp,
        "atk": enemy.atk,
        "def": enemy.def_,
        "exp": enemy.exp,
        "drop": enemy.drop,
    }


def export_level(level: LevelDef) -> dict[str, Any]:
    return {
        "number": level.number,
        "exp": level.exp,
        "hp": level.hp,
        "atk": level.atk,
        "def": level.def_,
    }


def export_starting_stats(stats: StartingStats) -> dict[str, Any]:
    return {"hp": stats.hp, "atk": stats.atk, "def": stats.def_}


def export_tower(tower: Tower) -> dict[str, Any]:
    """Convert a tower to its persisted record.

    Args:
        tower: The tower to export (not mutated).

    Returns:
        A JSON-serializable dict in the tower record format.
    """
    return {
        "name": tower.name,
        "enemies": [export_enemy(enemy) for enemy in tower.enemies],
        "levels": [export_level(level) for level in tower.levels],
        "startingStats": export_starting_stats(tower.starting_stats),
        "rooms": {
            "standard": [export_room(room) for room in tower.standard_rooms],
            "nexus": [export_room(room) for room in tower.nexus_rooms],
        },
    }


def export_tower_json(tower: Tower, indent: int | None = None) -> str:
    return json.dumps(export_tower(tower), indent=indent)
