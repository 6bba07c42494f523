"""Player position, inventory, and stats for Tower Crawler Server."""

from pydantic import BaseModel, Field

from models.tables import Color, ItemName
from models.tower import StartingStats


class Position(BaseModel):
    """A cell in the tower: standard room index, line, column."""
    room: int
    line: int
    column: int


class Inventory(BaseModel):
    """Keys per color and items held, both as counts."""
    keys: dict[Color, int] = {}
    items: dict[ItemName, int] = {}

    def has_key(self, color: Color) -> bool:
        return self.keys.get(color, 0) > 0

    def add_key(self, color: Color) -> None:
        self.keys[color] = self.keys.get(color, 0) + 1

    def use_key(self, color: Color) -> None:
        remaining = self.keys.get(color, 0) - 1
        if remaining < 0:
            raise ValueError(f"No {color.value} key to use")
        if remaining == 0:
            del self.keys[color]
        else:
            self.keys[color] = remaining

    def add_item(self, item: ItemName) -> None:
        self.items[item] = self.items.get(item, 0) + 1


class PlayerState(BaseModel):
    """The player's location and combat attributes."""
    position: Position
    inventory: Inventory = Field(default_factory=Inventory)
    hp: int = 0
    atk: int = 0
    def_: int = 0
    exp: int = 0
    level: int = 0

    @classmethod
    def from_starting_stats(cls, position: Position, stats: StartingStats) -> "PlayerState":
        return cls(position=position, hp=stats.hp, atk=stats.atk, def_=stats.def_)
