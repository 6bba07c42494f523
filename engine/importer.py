"""Persisted record -> Tower conversion with accumulated validation errors.

Import is best-effort: every problem found is appended to the error list
and the offending piece is skipped or degraded, so the caller always gets a
Tower back and decides whether the warnings are acceptable.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from config import TILES_IN_ROW
from engine.grid import count_starting_positions
from models.enemies import Enemy
from models.tables import DROPS, Color, EnemyType, ItemName, ScoreType, StaircaseDirection
from models.tiles import (
    EMPTY_TILE,
    STARTING_POSITION_TILE,
    WALL_TILE,
    DoorTile,
    EnemyTile,
    ItemTile,
    KeyTile,
    ScoreTile,
    StaircaseTile,
    Tile,
)
from models.tower import LevelDef, Room, ScoreMarker, StartingStats, Tower

logger = logging.getLogger(__name__)


class ImportResult(BaseModel):
    """A best-effort tower and everything that was wrong with its record."""
    tower: Tower
    errors: list[str] = []

    @property
    def ok(self) -> bool:
        return not self.errors


# --- Record schemas ---------------------------------------------------------

class EnemyRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    level: int | None = Field(default=None, ge=0)
    name: str
    hp: int | None = None
    atk: int | None = None
    def_: int | None = Field(default=None, alias="def")
    exp: int | None = None
    drop: str | None = None


class LevelRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    number: int = Field(ge=0)
    exp: int = Field(ge=0)
    hp: int = 0
    atk: int = 0
    def_: int = Field(default=0, alias="def")


class StatsRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hp: int
    atk: int
    def_: int = Field(alias="def")


class RoomRecord(BaseModel):
    name: str
    tiles: list[list[Any]]
    scores: list[Any] = []


class EmptyRecord(BaseModel):
    type: Literal["empty"]


class WallRecord(BaseModel):
    type: Literal["wall"]


class StartingPositionRecord(BaseModel):
    type: Literal["startingPosition"]


class DoorRecord(BaseModel):
    type: Literal["door"]
    color: Color


class KeyRecord(BaseModel):
    type: Literal["key"]
    color: Color


class ItemRecord(BaseModel):
    type: Literal["item"]
    name: ItemName


class EnemyTileRecord(BaseModel):
    type: Literal["enemy"]
    enemyType: str | None = None
    enemyLevel: int | None = None


class StaircaseRecord(BaseModel):
    type: Literal["staircase"]
    direction: StaircaseDirection


class ScoreRecord(BaseModel):
    type: Literal["score"]
    score: ScoreType


TILE_RECORD = TypeAdapter(
    Annotated[
        Union[
            EmptyRecord,
            WallRecord,
            StartingPositionRecord,
            DoorRecord,
            KeyRecord,
            ItemRecord,
            EnemyTileRecord,
            StaircaseRecord,
            ScoreRecord,
        ],
        Field(discriminator="type"),
    ]
)


def _format_errors(context: str, exc: ValidationError) -> list[str]:
    """Turn a pydantic error into one readable line per failed field."""
    lines = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        if loc:
            lines.append(f"{context}: {loc}: {err['msg']}")
        else:
            lines.append(f"{context}: {err['msg']}")
    return lines


def _is_invalid_list(value: Any) -> bool:
    return value is None or not isinstance(value, list)


def _enemy_type(value: str | None) -> EnemyType | None:
    """Unknown enemy kinds degrade to "unset" instead of failing."""
    if value is None:
        return None
    try:
        return EnemyType(value)
    except ValueError:
        logger.debug("Unknown enemy type %r imported as unset", value)
        return None


# --- Section importers -------------------------------------------------------

def _import_enemies(data: dict[str, Any], tower: Tower, errors: list[str], report_duplicates: bool) -> None:
    records = data.get("enemies")
    if _is_invalid_list(records):
        errors.append("Enemies value is invalid")
        return

    seen: set[tuple[EnemyType | None, int | None]] = set()
    for index, value in enumerate(records, start=1):
        context = f"Enemy {index}"
        if not isinstance(value, dict):
            errors.append(f"{context}: record must be an object")
            continue
        try:
            record = EnemyRecord.model_validate(value)
        except ValidationError as exc:
            errors.extend(_format_errors(context, exc))
            continue

        drop = record.drop if record.drop in DROPS else None
        enemy = Enemy(
            type=_enemy_type(record.type),
            level=record.level,
            name=record.name,
            hp=record.hp,
            atk=record.atk,
            def_=record.def_,
            exp=record.exp,
            drop=drop,
        )
        identity = (enemy.type, enemy.level)
        if report_duplicates and identity in seen:
            type_name = enemy.type.value if enemy.type is not None else None
            errors.append(f"{context}: duplicate enemy type {type_name} level {enemy.level}")
        seen.add(identity)
        tower.enemies.append(enemy)


def _import_levels(data: dict[str, Any], tower: Tower, errors: list[str]) -> None:
    records = data.get("levels")
    if _is_invalid_list(records):
        errors.append("Levels value is invalid")
        return

    for index, value in enumerate(records, start=1):
        context = f"Level {index}"
        try:
            record = LevelRecord.model_validate(value)
        except ValidationError as exc:
            errors.extend(_format_errors(context, exc))
            continue
        tower.levels.append(LevelDef(**record.model_dump()))


def _import_starting_stats(data: dict[str, Any], tower: Tower, errors: list[str]) -> None:
    value = data.get("startingStats")
    if value is None or not isinstance(value, dict):
        errors.append("Starting stats value is invalid")
        return
    try:
        record = StatsRecord.model_validate(value)
    except ValidationError as exc:
        errors.extend(_format_errors("Starting stats", exc))
        return
    tower.starting_stats = StartingStats(**record.model_dump())


def _find_roster_enemy(enemies: list[Enemy], record: EnemyTileRecord) -> Enemy | None:
    enemy_type = _enemy_type(record.enemyType)
    for enemy in enemies:
        if enemy.type == enemy_type and enemy.level == record.enemyLevel:
            return enemy
    return None


def _import_tile(value: Any, enemies: list[Enemy], context: str, errors: list[str]) -> Tile:
    """Build one tile; anything unusable becomes an empty tile."""
    try:
        record = TILE_RECORD.validate_python(value)
    except ValidationError as exc:
        errors.extend(_format_errors(context, exc))
        return EMPTY_TILE

    match record:
        case EmptyRecord():
            return EMPTY_TILE
        case WallRecord():
            return WALL_TILE
        case StartingPositionRecord():
            return STARTING_POSITION_TILE
        case DoorRecord(color=color):
            return DoorTile(color=color)
        case KeyRecord(color=color):
            return KeyTile(color=color)
        case ItemRecord(name=name):
            return ItemTile(item=name)
        case EnemyTileRecord():
            enemy = _find_roster_enemy(enemies, record)
            if enemy is None:
                errors.append(
                    f"{context}: no enemy of type {record.enemyType} level {record.enemyLevel} in roster"
                )
                return EMPTY_TILE
            return EnemyTile(enemy=enemy)
        case StaircaseRecord(direction=direction):
            return StaircaseTile(direction=direction)
        case ScoreRecord(score=score):
            return ScoreTile(score=score)
    raise TypeError(f"Unknown tile record: {record!r}")


def _import_room(value: Any, enemies: list[Enemy], context: str, errors: list[str]) -> Room | None:
    try:
        record = RoomRecord.model_validate(value)
    except ValidationError as exc:
        errors.extend(_format_errors(context, exc))
        return None

    if len(record.tiles) != TILES_IN_ROW or any(len(line) != TILES_IN_ROW for line in record.tiles):
        errors.append(f"{context}: tiles must be {TILES_IN_ROW} lines of {TILES_IN_ROW} tiles")

    tiles: list[list[Tile]] = []
    for line_index in range(TILES_IN_ROW):
        line_records = record.tiles[line_index] if line_index < len(record.tiles) else []
        line: list[Tile] = []
        for column_index in range(TILES_IN_ROW):
            if column_index < len(line_records):
                tile_context = f"{context}, tile ({line_index}, {column_index})"
                line.append(_import_tile(line_records[column_index], enemies, tile_context, errors))
            else:
                line.append(EMPTY_TILE)
        tiles.append(line)

    scores: list[ScoreMarker] = []
    taken: set[tuple[int, int]] = set()
    for index, marker_value in enumerate(record.scores, start=1):
        marker_context = f"{context}, score {index}"
        try:
            marker = ScoreMarker.model_validate(marker_value)
        except ValidationError as exc:
            errors.extend(_format_errors(marker_context, exc))
            continue
        if (marker.line, marker.column) in taken:
            errors.append(f"{marker_context}: position ({marker.line}, {marker.column}) already has a score")
            continue
        taken.add((marker.line, marker.column))
        scores.append(marker)

    return Room(name=record.name, tiles=tiles, scores=scores)


def _import_room_group(
    rooms: dict[str, Any],
    key: str,
    label: str,
    enemies: list[Enemy],
    errors: list[str],
    report_duplicates: bool,
) -> list[Room]:
    records = rooms.get(key)
    if records is None:
        return []
    if not isinstance(records, list):
        errors.append(f"{label} rooms value is invalid")
        return []

    result = []
    names: set[str] = set()
    for index, value in enumerate(records, start=1):
        context = f"{label} room {index}"
        room = _import_room(value, enemies, context, errors)
        if room is None:
            continue
        if report_duplicates and room.name in names:
            errors.append(f"{context}: duplicate room name {room.name!r}")
        names.add(room.name)
        result.append(room)
    return result


def _import_rooms(
    data: dict[str, Any],
    tower: Tower,
    errors: list[str],
    require_start: bool,
    report_duplicates: bool,
) -> None:
    rooms = data.get("rooms")
    if rooms is None or not isinstance(rooms, dict):
        errors.append("Rooms value is invalid")
        return
    tower.standard_rooms = _import_room_group(
        rooms, "standard", "Standard", tower.enemies, errors, report_duplicates
    )
    tower.nexus_rooms = _import_room_group(rooms, "nexus", "Nexus", tower.enemies, errors, report_duplicates)

    if require_start:
        starts = count_starting_positions(tower.standard_rooms)
        if starts != 1:
            errors.append(f"Expected exactly one starting position, found {starts}")


# --- Entry points -------------------------------------------------------------

def import_tower(
    data: str | bytes | dict[str, Any],
    require_start: bool = True,
    report_duplicates: bool = True,
) -> ImportResult:
    """Convert a tower record into a Tower.

    Never raises on malformed input. A record that is not JSON at all (not
    UTF-8, or not a JSON object) yields a default Tower and a single error.

    Args:
        data: The record, either as JSON text or already parsed.
        require_start: Report towers without exactly one starting position.
            Saved games have already consumed theirs.
        report_duplicates: Report duplicate enemy (type, level) pairs and
            duplicate room names. Both are playable, and a saved game keeps
            whatever the tower was accepted with.

    Returns:
        ImportResult with the best-effort tower and all errors found.
    """
    tower = Tower()
    errors: list[str] = []

    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as exc:           # JSONDecodeError or UnicodeDecodeError
            errors.append(f"Invalid tower record: {exc}")
            return ImportResult(tower=tower, errors=errors)
    if not isinstance(data, dict):
        errors.append("Invalid tower record: expected an object")
        return ImportResult(tower=tower, errors=errors)

    name = data.get("name")
    if isinstance(name, str):
        tower.name = name
    else:
        errors.append("Tower name is missing")

    _import_enemies(data, tower, errors, report_duplicates)
    _import_levels(data, tower, errors)
    _import_starting_stats(data, tower, errors)
    _import_rooms(data, tower, errors, require_start, report_duplicates)

    if errors:
        logger.warning("Imported tower %r with %d error(s)", tower.name, len(errors))
        for error in errors:
            logger.debug("Import error: %s", error)
    else:
        logger.info(
            "Imported tower %r: %d standard room(s), %d nexus room(s), %d enemies",
            tower.name,
            len(tower.standard_rooms),
            len(tower.nexus_rooms),
            len(tower.enemies),
        )
    return ImportResult(tower=tower, errors=errors)


def import_tower_file(path: str | Path) -> ImportResult:
    """Read a tower record from disk and import it."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        return ImportResult(tower=Tower(), errors=[f"Unable to read tower file {path}: {exc}"])
    return import_tower(raw)
