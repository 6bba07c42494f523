"""Tower rules: combat resolution, enemy drops, item effects, level-ups."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from pydantic import BaseModel

from engine.errors import UnknownDropError
from models.tables import DROPS_CONTENTS, ITEM_EFFECTS, DropType, ItemName
from models.tiles import EMPTY_TILE, EmptyTile, ItemTile, KeyTile

if TYPE_CHECKING:
    from models.enemies import Enemy
    from models.player import PlayerState
    from models.tower import LevelDef

logger = logging.getLogger(__name__)


class FightOutcome(BaseModel):
    """Result of evaluating a fight without applying it."""
    win: bool
    damage: int                     # HP the player would lose; 0 when not winnable
    rounds: int = 0


def evaluate_fight(player: PlayerState, enemy: Enemy) -> FightOutcome:
    """Decide whether the player beats an enemy, and at what cost.

    The player strikes first each round for ``atk - enemy.def``. The enemy
    answers for ``enemy.atk - def`` (at least 0) while it is still standing.
    The player wins if the total damage taken stays below their HP. Enemies
    with unauthored combat stats cannot be fought.

    Args:
        player: The player's current state (not mutated).
        enemy: The roster entry being fought.

    Returns:
        FightOutcome with the win flag and the damage the win would cost.
    """
    if enemy.hp is None or enemy.atk is None or enemy.def_ is None:
        return FightOutcome(win=False, damage=0)

    player_damage = player.atk - enemy.def_
    if player_damage <= 0:
        return FightOutcome(win=False, damage=0)

    rounds = max(1, math.ceil(enemy.hp / player_damage))
    enemy_damage = max(0, enemy.atk - player.def_)
    damage = (rounds - 1) * enemy_damage
    if damage >= player.hp:
        return FightOutcome(win=False, damage=0, rounds=rounds)
    return FightOutcome(win=True, damage=damage, rounds=rounds)


def can_defeat(player: PlayerState, enemy: Enemy) -> bool:
    return evaluate_fight(player, enemy).win


def drop_tile(enemy: Enemy) -> EmptyTile | KeyTile | ItemTile:
    """Resolve the tile an enemy leaves behind when killed.

    Raises:
        UnknownDropError: If the drop name is not in the drop table.
    """
    if enemy.drop is None:
        return EMPTY_TILE
    content = DROPS_CONTENTS.get(enemy.drop)
    if content is None:
        raise UnknownDropError(f"Unknown drop [{enemy.drop}]")
    if content.drop_type == DropType.KEY:
        return KeyTile(color=content.color)
    return ItemTile(item=content.item)


def apply_item(player: PlayerState, item: ItemName) -> None:
    """Add an item to the inventory and apply its stat bonuses."""
    player.inventory.add_item(item)
    effect = ITEM_EFFECTS.get(item)
    if effect is not None:
        player.hp += effect.hp
        player.atk += effect.atk
        player.def_ += effect.def_
        logger.debug("Item %s applied: hp+%d atk+%d def+%d", item.value, effect.hp, effect.atk, effect.def_)


def apply_level_ups(player: PlayerState, levels: list[LevelDef]) -> list[int]:
    """Grant every level the player's experience now reaches.

    Returns:
        The level numbers gained, in order.
    """
    gained = []
    for level in sorted(levels, key=lambda lv: lv.number):
        if level.number <= player.level:
            continue
        if player.exp < level.exp:
            break
        player.level = level.number
        player.hp += level.hp
        player.atk += level.atk
        player.def_ += level.def_
        gained.append(level.number)
        logger.debug("Player reached level %d", level.number)
    return gained
