"""Tile variants: the content of one grid cell."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from models.enemies import Enemy
from models.tables import Color, ItemName, ScoreType, StaircaseDirection


class TileType(str, Enum):
    """Tile tags, valued as they appear in tower records."""
    EMPTY = "empty"
    WALL = "wall"
    STARTING_POSITION = "startingPosition"
    DOOR = "door"
    KEY = "key"
    ITEM = "item"
    ENEMY = "enemy"
    STAIRCASE = "staircase"
    SCORE = "score"


class _BaseTile(BaseModel):
    model_config = ConfigDict(frozen=True)

    def kind(self) -> TileType:
        return self.type


class EmptyTile(_BaseTile):
    type: Literal[TileType.EMPTY] = TileType.EMPTY


class WallTile(_BaseTile):
    type: Literal[TileType.WALL] = TileType.WALL


class StartingPositionTile(_BaseTile):
    type: Literal[TileType.STARTING_POSITION] = TileType.STARTING_POSITION


class DoorTile(_BaseTile):
    type: Literal[TileType.DOOR] = TileType.DOOR
    color: Color


class KeyTile(_BaseTile):
    type: Literal[TileType.KEY] = TileType.KEY
    color: Color


class ItemTile(_BaseTile):
    type: Literal[TileType.ITEM] = TileType.ITEM
    item: ItemName


class EnemyTile(_BaseTile):
    type: Literal[TileType.ENEMY] = TileType.ENEMY
    enemy: Enemy                    # Roster entry, shared by reference


class StaircaseTile(_BaseTile):
    type: Literal[TileType.STAIRCASE] = TileType.STAIRCASE
    direction: StaircaseDirection


class ScoreTile(_BaseTile):
    """Score overlay. Never blocks movement."""
    type: Literal[TileType.SCORE] = TileType.SCORE
    score: ScoreType


Tile = Annotated[
    Union[
        EmptyTile,
        WallTile,
        StartingPositionTile,
        DoorTile,
        KeyTile,
        ItemTile,
        EnemyTile,
        StaircaseTile,
        ScoreTile,
    ],
    Field(discriminator="type"),
]

EMPTY_TILE = EmptyTile()
WALL_TILE = WallTile()
STARTING_POSITION_TILE = StartingPositionTile()


def describe_tile(tile: Tile) -> str | None:
    """Tooltip text for a tile, or None when the tile has nothing to say."""
    match tile:
        case EnemyTile(enemy=enemy):
            kind = enemy.type.value if enemy.type is not None else "??"
            level = enemy.level if enemy.level is not None else "??"
            return f"{kind} {level} ({enemy.name})"
        case ItemTile(item=item):
            return item.value
    return None
