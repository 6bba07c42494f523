"""Enemy roster entries for Tower Crawler Server."""

from pydantic import BaseModel, Field

from models.tables import EnemyType


class Enemy(BaseModel):
    """An enemy as authored in the tower roster.

    Stats stay ``None`` until the author fills them in. Enemy tiles hold a
    reference to one of these objects, never a copy.
    """
    type: EnemyType | None = None
    level: int | None = Field(default=None, ge=0)
    name: str = ""
    hp: int | None = None
    atk: int | None = None
    def_: int | None = None
    exp: int | None = None
    drop: str | None = None         # A key of DROPS_CONTENTS, or None
