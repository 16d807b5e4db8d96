"""
MamanVoice persistence facade.
One SQLite card store per process plus the live queries bound to it.
Structure on disk:
  data/
    cards.db   the card table (images and audio stored as BLOBs)
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from config import get_settings
from live_query import LiveQueries
from repositories import SqliteCardStore

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_card_store: Optional[SqliteCardStore] = None
_live_queries: Optional[LiveQueries] = None


def configure(db_path: Union[str, Path, None] = None) -> SqliteCardStore:
    """(Re)open the process-wide store at db_path (default: settings.db_path)."""
    global _card_store, _live_queries
    with _lock:
        _close_locked()
        path = db_path if db_path is not None else get_settings().db_path
        _card_store = SqliteCardStore(path)
        _live_queries = LiveQueries(_card_store)
        return _card_store


def get_card_store() -> SqliteCardStore:
    if _card_store is None:
        return configure()
    return _card_store


def get_live_queries() -> LiveQueries:
    if _live_queries is None:
        configure()
    return _live_queries


def _close_locked() -> None:
    global _card_store, _live_queries
    if _live_queries is not None:
        _live_queries.close()
    if _card_store is not None:
        _card_store.close()
        logger.info("Card store closed: %s", _card_store.db_path)
    _card_store = None
    _live_queries = None


def close() -> None:
    with _lock:
        _close_locked()
