"""FastAPI app entry point for Tower Crawler Server."""

import logging
import threading

from fastapi import FastAPI

from api.game import router as game_router
from api.tower import install_game, router as tower_router
from api.ws import router as ws_router
from config import LOG_LEVEL, SAVE_FILE, SERVER_NAME, SERVER_VERSION, TOWER_FILE
from engine.errors import SnapshotLoadError, TowerIntegrityError
from engine.importer import import_tower_file
from engine.play import load_game, start_game

logger = logging.getLogger(__name__)


def create_app(save_file: str = SAVE_FILE, tower_file: str | None = TOWER_FILE) -> FastAPI:
    """Build the app, restoring the saved game or starting one from a tower file.

    Args:
        save_file: Where the game snapshot is read from and written to.
        tower_file: Tower record to start from when there is no snapshot.

    Returns:
        The configured FastAPI application.
    """
    app = FastAPI(
        title=SERVER_NAME,
        description="Action resolution server for tile-based tower crawlers",
        version=SERVER_VERSION,
    )
    app.state.save_file = save_file
    app.state.game = None
    app.state.buffer = None
    app.state.lock = threading.RLock()      # Serializes access to the live game

    try:
        game_state = load_game(save_file)
    except SnapshotLoadError as e:
        logger.error("Ignoring unreadable snapshot: %s", e)
        game_state = None

    if game_state is None and tower_file:
        result = import_tower_file(tower_file)
        for error in result.errors:
            logger.warning("%s: %s", tower_file, error)
        try:
            game_state = start_game(result.tower)
        except TowerIntegrityError as e:
            logger.error("Cannot start tower %s: %s", tower_file, e)

    if game_state is not None:
        install_game(app, game_state)

    app.include_router(tower_router, prefix="/tower", tags=["Tower"])
    app.include_router(game_router, prefix="/game", tags=["Game"])
    app.include_router(ws_router, prefix="/game", tags=["WebSocket"])

    @app.get("/")
    def root() -> dict:
        """Root endpoint returning server info."""
        return {"name": SERVER_NAME, "version": SERVER_VERSION, "status": "running"}

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint."""
        return {"healthy": True}

    return app


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
app = create_app()
