"""Tests for static tables, tile variants, rooms and the player inventory."""

import pytest
from pydantic import ValidationError

from config import TILES_IN_ROW
from models.enemies import Enemy
from models.player import Inventory
from models.tables import (
    DROPS,
    DROPS_CONTENTS,
    ITEM_EFFECTS,
    Color,
    DropType,
    EnemyType,
    ItemName,
    ScoreType,
    StaircaseDirection,
    key_drop_name,
)
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
    TileType,
    describe_tile,
)
from models.tower import Room, ScoreMarker, Tower


class TestDropTable:
    """Tests for the drop table."""

    @pytest.mark.parametrize(
        "color,expected",
        [
            (Color.BLUE, "Blue key"),
            (Color.CRIMSON, "Crimson key"),
            (Color.GREEN_BLUE, "Green blue key"),
            (Color.PLATINUM, "Platinum key"),
            (Color.VIOLET, "Violet key"),
            (Color.YELLOW, "Yellow key"),
        ],
    )
    def test_key_drop_names(self, color, expected):
        assert key_drop_name(color) == expected

    def test_every_item_is_a_drop(self):
        for item in ItemName:
            content = DROPS_CONTENTS[item.value]
            assert content.drop_type == DropType.ITEM
            assert content.item == item

    def test_every_color_has_a_key_drop(self):
        for color in Color:
            content = DROPS_CONTENTS[key_drop_name(color)]
            assert content.drop_type == DropType.KEY
            assert content.color == color

    def test_drops_lists_table_keys(self):
        assert set(DROPS) == set(DROPS_CONTENTS)
        assert len(DROPS) == len(ItemName) + len(Color)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DROPS_CONTENTS["Blue key"] = None
        with pytest.raises(TypeError):
            ITEM_EFFECTS[ItemName.GOLDEN_FEATHER] = None


class TestTiles:
    """Tests for tile variants."""

    def test_kinds(self):
        assert EMPTY_TILE.kind() == TileType.EMPTY
        assert WALL_TILE.kind() == TileType.WALL
        assert STARTING_POSITION_TILE.kind() == TileType.STARTING_POSITION
        assert DoorTile(color=Color.BLUE).kind() == TileType.DOOR
        assert KeyTile(color=Color.BLUE).kind() == TileType.KEY
        assert ItemTile(item=ItemName.RED_POTION).kind() == TileType.ITEM
        assert EnemyTile(enemy=Enemy(name="Rat")).kind() == TileType.ENEMY
        assert StaircaseTile(direction=StaircaseDirection.UP).kind() == TileType.STAIRCASE
        assert ScoreTile(score=ScoreType.STAR).kind() == TileType.SCORE

    def test_payload_required(self):
        with pytest.raises(ValidationError):
            DoorTile()

    def test_wrong_accessor_is_an_error(self):
        with pytest.raises(AttributeError):
            WALL_TILE.color

    def test_enemy_tile_keeps_roster_reference(self):
        enemy = Enemy(name="Rat", type=EnemyType.FIGHTER, level=1)
        tile = EnemyTile(enemy=enemy)
        assert tile.enemy is enemy

    def test_tiles_are_immutable(self):
        tile = KeyTile(color=Color.BLUE)
        with pytest.raises(ValidationError):
            tile.color = Color.CRIMSON


class TestDescribeTile:
    """Tests for describe_tile()."""

    def test_enemy(self):
        enemy = Enemy(name="Bandit", type=EnemyType.SLASHER, level=3)
        assert describe_tile(EnemyTile(enemy=enemy)) == "slasher 3 (Bandit)"

    def test_unauthored_enemy(self):
        assert describe_tile(EnemyTile(enemy=Enemy(name="Draft"))) == "?? ?? (Draft)"

    def test_item(self):
        assert describe_tile(ItemTile(item=ItemName.PULSE_BOOK_SWORD)) == "Pulse book <Sword>"

    def test_other_tiles(self):
        assert describe_tile(WALL_TILE) is None
        assert describe_tile(KeyTile(color=Color.YELLOW)) is None


class TestRoom:
    """Tests for the Room model."""

    def test_empty_room_dimensions(self):
        room = Room.empty("Hall")
        assert len(room.tiles) == TILES_IN_ROW
        assert all(len(line) == TILES_IN_ROW for line in room.tiles)
        assert all(tile is EMPTY_TILE for line in room.tiles for tile in line)

    def test_lines_are_independent(self):
        room = Room.empty()
        room.tiles[0][0] = WALL_TILE
        assert room.tiles[1][0] is EMPTY_TILE

    def test_non_square_rejected(self):
        with pytest.raises(ValidationError, match="grid"):
            Room(name="Bad", tiles=[[EMPTY_TILE] * TILES_IN_ROW])

    def test_duplicate_score_positions_rejected(self):
        room = Room.empty()
        with pytest.raises(ValidationError, match="distinct"):
            Room(
                name="Bad",
                tiles=room.tiles,
                scores=[
                    ScoreMarker(line=1, column=1, type=ScoreType.STAR),
                    ScoreMarker(line=1, column=1, type=ScoreType.CROWN),
                ],
            )

    def test_score_at(self):
        room = Room(
            name="Scored",
            tiles=Room.empty().tiles,
            scores=[ScoreMarker(line=2, column=3, type=ScoreType.CHECK)],
        )
        assert room.score_at(2, 3) == ScoreType.CHECK
        assert room.score_at(3, 2) is None

    def test_score_marker_bounds(self):
        with pytest.raises(ValidationError):
            ScoreMarker(line=TILES_IN_ROW, column=0, type=ScoreType.STAR)


class TestTower:
    """Tests for the Tower model."""

    def test_has_enemy_uses_identity(self):
        enemy = Enemy(name="Rat")
        tower = Tower(enemies=[enemy])
        assert tower.has_enemy(enemy)
        assert not tower.has_enemy(Enemy(name="Rat"))


class TestInventory:
    """Tests for Inventory."""

    def test_keys(self):
        inventory = Inventory()
        assert not inventory.has_key(Color.BLUE)
        inventory.add_key(Color.BLUE)
        inventory.add_key(Color.BLUE)
        assert inventory.keys[Color.BLUE] == 2
        inventory.use_key(Color.BLUE)
        assert inventory.keys[Color.BLUE] == 1
        inventory.use_key(Color.BLUE)
        assert not inventory.has_key(Color.BLUE)
        assert Color.BLUE not in inventory.keys

    def test_use_missing_key(self):
        with pytest.raises(ValueError, match="crimson"):
            Inventory().use_key(Color.CRIMSON)

    def test_items(self):
        inventory = Inventory()
        inventory.add_item(ItemName.GOLDEN_FEATHER)
        inventory.add_item(ItemName.GOLDEN_FEATHER)
        assert inventory.items == {ItemName.GOLDEN_FEATHER: 2}

    def test_default_inventories_not_shared(self):
        first = Inventory()
        first.add_key(Color.VIOLET)
        assert Inventory().keys == {}
