"""Persistence layer: abstract interface and implementations."""

from .base import ChangeListener, StoreProtocol
from .sqlite_store import SqliteCardStore

__all__ = ["ChangeListener", "StoreProtocol", "SqliteCardStore"]
