"""API route modules."""

from .health import router as health_router
from .board import router as board_router
from .cards import router as cards_router
from .backup import router as backup_router
from .audio import router as audio_router
from .symbols import router as symbols_router

__all__ = [
    "health_router",
    "board_router",
    "cards_router",
    "backup_router",
    "audio_router",
    "symbols_router",
]
