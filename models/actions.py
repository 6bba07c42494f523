"""Movement requests and action results for Tower Crawler Server."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from models.player import Position
from models.tables import Color, ItemName
from models.tiles import EMPTY_TILE, EmptyTile, ItemTile, KeyTile


class Direction(str, Enum):
    """The four cardinal moves a player can request."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """(line, column) offset of one step in this direction."""
        return _DELTAS[self]


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


class ActionType(str, Enum):
    """Everything a resolved move can turn out to be."""
    MOVE = "move"
    PICK_KEY = "pickKey"
    PICK_ITEM = "pickItem"
    OPEN_DOOR = "openDoor"
    KILL_ENEMY = "killEnemy"
    USE_STAIRCASE = "useStaircase"


class _BaseAction(BaseModel):
    player: Position                # Where the player stood before the move
    target: Position                # The cell the move was aimed at

    def kind(self) -> ActionType:
        return self.type


class PlayerMove(_BaseAction):
    type: Literal[ActionType.MOVE] = ActionType.MOVE


class PickKey(_BaseAction):
    type: Literal[ActionType.PICK_KEY] = ActionType.PICK_KEY
    color: Color


class PickItem(_BaseAction):
    type: Literal[ActionType.PICK_ITEM] = ActionType.PICK_ITEM
    item: ItemName


class OpenDoor(_BaseAction):
    type: Literal[ActionType.OPEN_DOOR] = ActionType.OPEN_DOOR
    color: Color


class KillEnemy(_BaseAction):
    type: Literal[ActionType.KILL_ENEMY] = ActionType.KILL_ENEMY
    enemy_name: str
    drop_tile: Annotated[
        Union[EmptyTile, KeyTile, ItemTile], Field(discriminator="type")
    ] = EMPTY_TILE
    damage_taken: int = 0
    exp_gained: int = 0


class UseStaircase(_BaseAction):
    type: Literal[ActionType.USE_STAIRCASE] = ActionType.USE_STAIRCASE
    destination: Position           # Where the paired staircase put the player


Action = Annotated[
    Union[PlayerMove, PickKey, PickItem, OpenDoor, KillEnemy, UseStaircase],
    Field(discriminator="type"),
]


class MoveRequest(BaseModel):
    """A single requested step."""
    direction: Direction


class MovesRequest(BaseModel):
    """A burst of buffered steps, resolved in order."""
    directions: list[Direction]


class MovesResult(BaseModel):
    """Actions committed while draining a burst of steps."""
    actions: list[Action]
    rejected: bool                  # True if a step was blocked and the rest dropped
