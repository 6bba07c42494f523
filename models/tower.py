"""Tower, room, and level data models for Tower Crawler Server."""

from pydantic import BaseModel, Field, model_validator

from config import TILES_IN_ROW
from models.enemies import Enemy
from models.tables import ScoreType
from models.tiles import EMPTY_TILE, Tile


class ScoreMarker(BaseModel):
    """A score overlay drawn on one cell of a room."""
    line: int = Field(ge=0, lt=TILES_IN_ROW)
    column: int = Field(ge=0, lt=TILES_IN_ROW)
    type: ScoreType


class Room(BaseModel):
    """One square grid of tiles, indexed as tiles[line][column]."""
    name: str = ""
    tiles: list[list[Tile]]
    scores: list[ScoreMarker] = []

    @model_validator(mode="after")
    def _check_shape(self) -> "Room":
        if len(self.tiles) != TILES_IN_ROW or any(len(line) != TILES_IN_ROW for line in self.tiles):
            raise ValueError(f"Room tiles must be a {TILES_IN_ROW}x{TILES_IN_ROW} grid")
        positions = {(s.line, s.column) for s in self.scores}
        if len(positions) != len(self.scores):
            raise ValueError("Score markers must be at distinct positions")
        return self

    @classmethod
    def empty(cls, name: str = "") -> "Room":
        """Build a room with every cell empty."""
        return cls(
            name=name,
            tiles=[[EMPTY_TILE] * TILES_IN_ROW for _ in range(TILES_IN_ROW)],
        )

    def score_at(self, line: int, column: int) -> ScoreType | None:
        for marker in self.scores:
            if marker.line == line and marker.column == column:
                return marker.type
        return None


class LevelDef(BaseModel):
    """A player level: experience threshold and the bonuses it grants."""
    number: int = Field(ge=0)
    exp: int = Field(ge=0)          # Cumulative experience required
    hp: int = 0
    atk: int = 0
    def_: int = 0


class StartingStats(BaseModel):
    """Combat stats the player begins the tower with."""
    hp: int = 0
    atk: int = 0
    def_: int = 0


class Tower(BaseModel):
    """The full tower definition: rooms, roster, levels, starting stats."""
    name: str = ""
    enemies: list[Enemy] = []
    standard_rooms: list[Room] = []
    nexus_rooms: list[Room] = []
    levels: list[LevelDef] = []
    starting_stats: StartingStats = StartingStats()

    def has_enemy(self, enemy: Enemy) -> bool:
        """Check that an enemy object belongs to the roster (by identity)."""
        return any(entry is enemy for entry in self.enemies)
