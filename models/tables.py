"""Static data tables: colors, enemy kinds, item names, drops.

Everything here is built once at import time and never mutated.
"""

import re
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict


class Color(str, Enum):
    """Key and door colors."""
    BLUE = "blue"
    CRIMSON = "crimson"
    GREEN_BLUE = "greenBlue"
    PLATINUM = "platinum"
    VIOLET = "violet"
    YELLOW = "yellow"


class EnemyType(str, Enum):
    BURGEONER = "burgeoner"
    FIGHTER = "fighter"
    RANGER = "ranger"
    SHADOW = "shadow"
    SLASHER = "slasher"


class ItemName(str, Enum):
    """Collectible items. Values are the persisted display names."""
    BLUE_POTION = "Blue potion"
    DROP_OF_DREAM_OCEAN = "Drop of dream ocean"
    GOLDEN_FEATHER = "Golden feather"
    GUARD_CARD = "Guard card"
    GUARD_DECK = "Guard deck"
    GUARD_GEM = "Guard gem"
    GUARD_PIECE = "Guard piece"
    GUARD_POTION = "Guard potion"
    HEAVENLY_POTION = "Heavenly potion"
    LIFE_CROWN = "Life Crown"
    LIFE_POTION = "Life potion"
    POWER_CARD = "Power card"
    POWER_DECK = "Power deck"
    POWER_GEM = "Power gem"
    POWER_PIECE = "Power piece"
    POWER_POTION = "Power potion"
    PULSE_BOOK_SHIELD = "Pulse book <Shield>"
    PULSE_BOOK_SWORD = "Pulse book <Sword>"
    RED_POTION = "Red potion"


class ScoreType(str, Enum):
    """Score overlay markers placed on rooms."""
    CHECK = "check"
    CROWN = "crown"
    STAR = "star"


class StaircaseDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class DropType(str, Enum):
    KEY = "key"
    ITEM = "item"


class DropContent(BaseModel):
    """What an enemy leaves behind: either a key color or an item."""
    model_config = ConfigDict(frozen=True)

    drop_type: DropType
    color: Color | None = None
    item: ItemName | None = None


class ItemEffect(BaseModel):
    """Stat bonuses granted when an item is picked up."""
    model_config = ConfigDict(frozen=True)

    hp: int = 0
    atk: int = 0
    def_: int = 0


def key_drop_name(color: Color) -> str:
    """Drop table name for a key, e.g. ``Color.GREEN_BLUE`` -> ``"Green blue key"``."""
    return re.sub(r"(?<!^)(?=[A-Z])", " ", color.value).capitalize() + " key"


def _build_drops() -> dict[str, DropContent]:
    contents: dict[str, DropContent] = {}
    for item in ItemName:
        contents[item.value] = DropContent(drop_type=DropType.ITEM, item=item)
    for color in Color:
        contents[key_drop_name(color)] = DropContent(drop_type=DropType.KEY, color=color)
    return contents


DROPS_CONTENTS = MappingProxyType(_build_drops())
DROPS: tuple[str, ...] = tuple(DROPS_CONTENTS)

ITEM_EFFECTS = MappingProxyType({
    ItemName.RED_POTION: ItemEffect(hp=50),
    ItemName.BLUE_POTION: ItemEffect(hp=200),
    ItemName.LIFE_POTION: ItemEffect(hp=500),
    ItemName.HEAVENLY_POTION: ItemEffect(hp=1000),
    ItemName.POWER_PIECE: ItemEffect(atk=1),
    ItemName.POWER_GEM: ItemEffect(atk=3),
    ItemName.POWER_CARD: ItemEffect(atk=5),
    ItemName.POWER_DECK: ItemEffect(atk=10),
    ItemName.GUARD_PIECE: ItemEffect(def_=1),
    ItemName.GUARD_GEM: ItemEffect(def_=3),
    ItemName.GUARD_CARD: ItemEffect(def_=5),
    ItemName.GUARD_DECK: ItemEffect(def_=10),
})
