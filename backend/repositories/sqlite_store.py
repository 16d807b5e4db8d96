"""
SQLite implementation of StoreProtocol.
One flat `cards` table; the hierarchy is expressed only through parent_id.
Blocking sqlite3 calls run in a worker thread so every operation is awaitable.
"""

import asyncio
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from errors import CardExists
from models import Asset, Card, CardType
from repositories.base import ChangeListener

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cards (
    id TEXT PRIMARY KEY,
    parent_id TEXT,
    type TEXT NOT NULL,
    label TEXT NOT NULL,
    sort_order NUMERIC NOT NULL,
    image BLOB,
    image_type TEXT,
    audio BLOB,
    audio_type TEXT
);
CREATE INDEX IF NOT EXISTS idx_cards_parent_type
    ON cards (parent_id, type, sort_order);
"""

_COLUMNS = "id, parent_id, type, label, sort_order, image, image_type, audio, audio_type"

_INSERT = f"INSERT INTO cards ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)"

_DUPLICATE_ID = "UNIQUE constraint failed: cards.id"

# Upsert keeps the existing rowid, so a replaced card keeps its tie-break position.
_UPSERT = _INSERT + """
ON CONFLICT(id) DO UPDATE SET
    parent_id = excluded.parent_id,
    type = excluded.type,
    label = excluded.label,
    sort_order = excluded.sort_order,
    image = excluded.image,
    image_type = excluded.image_type,
    audio = excluded.audio,
    audio_type = excluded.audio_type
"""


def _asset_from(data: Optional[bytes], mime: Optional[str]) -> Optional[Asset]:
    if data is None:
        return None
    return Asset(data=bytes(data), mime=mime) if mime else Asset(data=bytes(data))


def _row_to_card(row: sqlite3.Row) -> Card:
    return Card(
        id=row["id"],
        parent_id=row["parent_id"],
        type=row["type"],
        label=row["label"],
        order=row["sort_order"],
        image=_asset_from(row["image"], row["image_type"]),
        audio=_asset_from(row["audio"], row["audio_type"]),
    )


def _card_to_params(card: Card) -> tuple:
    return (
        card.id,
        card.parent_id,
        card.type,
        card.label,
        card.order,
        card.image.data if card.image else None,
        card.image.mime if card.image else None,
        card.audio.data if card.audio else None,
        card.audio.mime if card.audio else None,
    )


class SqliteCardStore:
    """Embedded card table. Single local writer; each call is atomic on its own."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        if str(db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        self._conn.commit()
        self._lock = threading.Lock()
        self._listeners: list[ChangeListener] = []
        logger.info("Card store opened at %s", self.db_path)

    # Change notification
    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(kind)
            except Exception:
                logger.exception("Change listener failed for %s", kind)

    async def _run(self, fn, *args):
        return await asyncio.to_thread(self._locked, fn, *args)

    def _locked(self, fn, *args):
        with self._lock:
            return fn(*args)

    # Blocking helpers (called with the lock held)
    def _fetch(self, sql: str, params: tuple = ()) -> list[Card]:
        return [_row_to_card(r) for r in self._conn.execute(sql, params).fetchall()]

    def _insert(self, card: Card) -> None:
        try:
            self._conn.execute(_INSERT, _card_to_params(card))
        except sqlite3.IntegrityError as e:
            # Only the primary key is a duplicate; NOT NULL failures propagate as-is.
            if _DUPLICATE_ID in str(e):
                raise CardExists(card.id) from e
            raise

    def _insert_rows(self, cards: list[Card]) -> None:
        for card in cards:
            self._insert(card)

    def _add(self, card: Card) -> None:
        with self._conn:
            self._insert(card)

    def _put(self, card: Card) -> None:
        with self._conn:
            self._conn.execute(_UPSERT, _card_to_params(card))

    def _get(self, card_id: str) -> Optional[Card]:
        rows = self._fetch(f"SELECT {_COLUMNS} FROM cards WHERE id = ?", (card_id,))
        return rows[0] if rows else None

    def _delete(self, card_id: str) -> bool:
        with self._conn:
            cur = self._conn.execute("DELETE FROM cards WHERE id = ?", (card_id,))
        return cur.rowcount > 0

    def _count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM cards").fetchone()[0]

    def _bulk_add(self, cards: list[Card]) -> None:
        with self._conn:
            self._insert_rows(cards)

    def _clear(self) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM cards")

    def _replace_all(self, cards: list[Card]) -> None:
        # DELETE and INSERTs share one transaction; any failure rolls both back.
        with self._conn:
            self._conn.execute("DELETE FROM cards")
            self._insert_rows(cards)

    # Public async API
    async def add(self, card: Card) -> None:
        await self._run(self._add, card)
        self._notify("add")

    async def put(self, card: Card) -> None:
        await self._run(self._put, card)
        self._notify("put")

    async def get(self, card_id: str) -> Optional[Card]:
        return await self._run(self._get, card_id)

    async def delete(self, card_id: str) -> bool:
        deleted = await self._run(self._delete, card_id)
        if deleted:
            self._notify("delete")
        return deleted

    async def count(self) -> int:
        return await self._run(self._count)

    async def list_by_parent_and_type(
        self, parent_id: Optional[str], card_type: CardType
    ) -> list[Card]:
        """Children of one type, ascending by order; ties keep insertion order."""
        return await self._run(
            self._fetch,
            f"SELECT {_COLUMNS} FROM cards WHERE parent_id IS ? AND type = ? "
            "ORDER BY sort_order, rowid",
            (parent_id, card_type),
        )

    async def list_by_parent(self, parent_id: Optional[str]) -> list[Card]:
        return await self._run(
            self._fetch,
            f"SELECT {_COLUMNS} FROM cards WHERE parent_id IS ? ORDER BY sort_order, rowid",
            (parent_id,),
        )

    async def list_all(self) -> list[Card]:
        return await self._run(self._fetch, f"SELECT {_COLUMNS} FROM cards ORDER BY rowid")

    async def clear(self) -> None:
        await self._run(self._clear)
        self._notify("clear")

    async def bulk_add(self, cards: Iterable[Card]) -> None:
        await self._run(self._bulk_add, list(cards))
        self._notify("bulk_add")

    async def replace_all(self, cards: Iterable[Card]) -> None:
        """clear() + bulk_add(cards) as one all-or-nothing transaction."""
        await self._run(self._replace_all, list(cards))
        self._notify("replace")

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        self._listeners.clear()
