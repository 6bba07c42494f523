"""Game session state for Tower Crawler Server."""

from typing import Callable

from pydantic import BaseModel, PrivateAttr

from models.actions import Action
from models.player import PlayerState
from models.tower import Tower


class GameState(BaseModel):
    """One player walking one tower.

    The tower here is the live copy: tiles are emptied or replaced as the
    player picks things up, opens doors and defeats enemies.
    """
    tower: Tower
    player: PlayerState
    action_log: list[Action] = []   # Committed actions, oldest first
    _listeners: list[Callable[[Action], None]] = PrivateAttr(default_factory=list)

    def subscribe(self, listener: Callable[[Action], None]) -> None:
        """Register a callback invoked with every committed action."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[Action], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, action: Action) -> None:
        for listener in list(self._listeners):
            listener(action)
