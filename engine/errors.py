"""Exceptions raised by the tower engine.

A rejected move is not an error: ``resolve_move`` returns None for it. These
exceptions flag content that breaks the tower's invariants, which import
validation is supposed to have caught.
"""


class TowerError(Exception):
    """Base exception for the engine."""


class TowerIntegrityError(TowerError):
    """Raised when tower content violates a structural invariant."""


class UnknownDropError(TowerIntegrityError):
    """Raised when an enemy's drop is not in the drop table."""


class SnapshotLoadError(TowerError):
    """Raised when a saved game snapshot cannot be read back."""
