"""Tests for room bounds, starting/staircase search and reachability."""

import pytest

from config import TILES_IN_ROW
from engine.errors import TowerIntegrityError
from engine.grid import (
    count_starting_positions,
    find_staircase_position,
    find_starting_position,
    in_bounds,
    is_enterable,
    reachable_tiles,
)
from models.enemies import Enemy
from models.player import PlayerState, Position
from models.tables import Color, EnemyType, ItemName, ScoreType, StaircaseDirection
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
)
from models.tower import Room, ScoreMarker


def _make_room(name: str = "Room", tiles: dict | None = None) -> Room:
    """Helper to create a room with tiles placed at (line, column) keys."""
    room = Room.empty(name)
    for (line, column), tile in (tiles or {}).items():
        room.tiles[line][column] = tile
    return room


def _make_player(room: int = 0, line: int = 5, column: int = 5) -> PlayerState:
    """Helper to create a test player."""
    return PlayerState(position=Position(room=room, line=line, column=column), hp=100, atk=10, def_=10)


class TestInBounds:
    """Tests for in_bounds()."""

    def test_corners(self):
        assert in_bounds(0, 0)
        assert in_bounds(TILES_IN_ROW - 1, TILES_IN_ROW - 1)

    def test_outside(self):
        assert not in_bounds(-1, 0)
        assert not in_bounds(0, -1)
        assert not in_bounds(TILES_IN_ROW, 0)
        assert not in_bounds(0, TILES_IN_ROW)


class TestFindStartingPosition:
    """Tests for find_starting_position()."""

    def test_found_and_consumed(self):
        rooms = [_make_room("A"), _make_room("B", {(3, 4): STARTING_POSITION_TILE})]
        position = find_starting_position(rooms)
        assert position == Position(room=1, line=3, column=4)
        assert rooms[1].tiles[3][4] is EMPTY_TILE
        assert count_starting_positions(rooms) == 0

    def test_missing(self):
        with pytest.raises(TowerIntegrityError, match="starting position"):
            find_starting_position([_make_room()])

    def test_count(self):
        rooms = [
            _make_room("A", {(0, 0): STARTING_POSITION_TILE}),
            _make_room("B", {(1, 1): STARTING_POSITION_TILE}),
        ]
        assert count_starting_positions(rooms) == 2


class TestFindStaircasePosition:
    """Tests for find_staircase_position()."""

    def test_found(self):
        rooms = [
            _make_room("A"),
            _make_room("B", {
                (2, 2): StaircaseTile(direction=StaircaseDirection.UP),
                (7, 8): StaircaseTile(direction=StaircaseDirection.DOWN),
            }),
        ]
        assert find_staircase_position(rooms, 1, StaircaseDirection.DOWN) == Position(room=1, line=7, column=8)
        assert find_staircase_position(rooms, 1, StaircaseDirection.UP) == Position(room=1, line=2, column=2)

    def test_missing(self):
        rooms = [_make_room("A", {(2, 2): StaircaseTile(direction=StaircaseDirection.UP)})]
        with pytest.raises(TowerIntegrityError, match="down staircase"):
            find_staircase_position(rooms, 0, StaircaseDirection.DOWN)


class TestIsEnterable:
    """Tests for is_enterable()."""

    def test_open_tiles(self):
        player = _make_player()
        for tile in (
            EMPTY_TILE,
            STARTING_POSITION_TILE,
            KeyTile(color=Color.BLUE),
            ItemTile(item=ItemName.RED_POTION),
            StaircaseTile(direction=StaircaseDirection.UP),
            ScoreTile(score=ScoreType.STAR),
        ):
            assert is_enterable(tile, player)

    def test_wall(self):
        assert not is_enterable(WALL_TILE, _make_player())

    def test_door_needs_key(self):
        player = _make_player()
        door = DoorTile(color=Color.VIOLET)
        assert not is_enterable(door, player)
        player.inventory.add_key(Color.VIOLET)
        assert is_enterable(door, player)

    def test_enemy_needs_win(self):
        weak = Enemy(name="Weak", hp=10, atk=1, def_=0)
        strong = Enemy(name="Strong", hp=10, atk=1, def_=50)
        assert is_enterable(EnemyTile(enemy=weak), _make_player())
        assert not is_enterable(EnemyTile(enemy=strong), _make_player())


class TestReachableTiles:
    """Tests for reachable_tiles()."""

    def test_open_room_fully_reachable(self):
        grid = reachable_tiles([_make_room()], _make_player())
        assert len(grid) == TILES_IN_ROW
        assert all(all(line) for line in grid)

    def test_consistency(self):
        """A cell is unreachable exactly for walls, locked doors and unwinnable enemies."""
        weak = Enemy(type=EnemyType.FIGHTER, level=1, name="Weak", hp=10, atk=20, def_=0)
        strong = Enemy(type=EnemyType.FIGHTER, level=9, name="Strong", hp=999, atk=999, def_=9)
        blocked = {(0, 1), (2, 2), (4, 4)}
        room = _make_room("Mixed", {
            (0, 1): WALL_TILE,
            (2, 2): DoorTile(color=Color.CRIMSON),
            (2, 3): DoorTile(color=Color.BLUE),
            (3, 3): EnemyTile(enemy=weak),
            (4, 4): EnemyTile(enemy=strong),
            (5, 6): KeyTile(color=Color.YELLOW),
            (6, 6): ItemTile(item=ItemName.LIFE_CROWN),
            (7, 7): StaircaseTile(direction=StaircaseDirection.DOWN),
            (8, 8): ScoreTile(score=ScoreType.CROWN),
        })
        room.scores = [ScoreMarker(line=0, column=2, type=ScoreType.STAR)]
        player = _make_player()
        player.inventory.add_key(Color.BLUE)

        grid = reachable_tiles([room], player)
        for line in range(TILES_IN_ROW):
            for column in range(TILES_IN_ROW):
                assert grid[line][column] == ((line, column) not in blocked), (line, column)

    def test_uses_current_room(self):
        rooms = [_make_room("A"), _make_room("B", {(1, 1): WALL_TILE})]
        assert reachable_tiles(rooms, _make_player(room=0))[1][1]
        assert not reachable_tiles(rooms, _make_player(room=1))[1][1]

    def test_does_not_mutate(self):
        room = _make_room("A", {(1, 1): KeyTile(color=Color.BLUE)})
        player = _make_player()
        reachable_tiles([room], player)
        assert room.tiles[1][1] == KeyTile(color=Color.BLUE)
        assert player.inventory.keys == {}
