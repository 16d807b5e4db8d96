"""
Live queries over the card store.

Strategy is poll-on-signal: every successful store mutation bumps a ChangeSignal
and every open query re-runs in full. No per-field dependency tracking; the
board holds a handful of cards per scope so a full requery is cheap.
"""

import asyncio
import logging
import threading
from typing import AsyncIterator, Optional

from models import FOLDER, ROOT, SPEAK, Card
from repositories.base import StoreProtocol

logger = logging.getLogger(__name__)


class ChangeSignal:
    """Monotonic change counter with awaitable waits.

    Waiters may live on any event loop; wake-ups are scheduled on the waiter's
    own loop.
    """

    def __init__(self):
        self.version = 0
        self.last_kind: Optional[str] = None
        self._waiters: set[asyncio.Future] = set()
        self._lock = threading.Lock()

    def notify(self, kind: str = "change") -> None:
        with self._lock:
            self.version += 1
            self.last_kind = kind
            waiters, self._waiters = self._waiters, set()
        for fut in waiters:
            try:
                fut.get_loop().call_soon_threadsafe(_wake, fut)
            except RuntimeError:
                logger.debug("Dropping waiter on a closed event loop")

    async def wait_for_change(self, seen: int) -> int:
        """Suspend until version differs from `seen`; return the new version."""
        while True:
            with self._lock:
                if self.version != seen:
                    return self.version
                fut = asyncio.get_running_loop().create_future()
                self._waiters.add(fut)
            try:
                await fut
            finally:
                with self._lock:
                    self._waiters.discard(fut)


def _wake(fut: asyncio.Future) -> None:
    if not fut.done():
        fut.set_result(None)


class LiveQueries:
    """Reactive, ordered views of the card tree per scope (None = root)."""

    def __init__(self, store: StoreProtocol, signal: Optional[ChangeSignal] = None):
        self.store = store
        self.signal = signal or ChangeSignal()
        self._unsubscribe = store.subscribe(self.signal.notify)

    async def children(self, scope: Optional[str] = ROOT) -> tuple[Card, ...]:
        """Folders first (by order), then speak cards (by order). Never interleaved."""
        folders = await self.store.list_by_parent_and_type(scope, FOLDER)
        speak = await self.store.list_by_parent_and_type(scope, SPEAK)
        return tuple(folders) + tuple(speak)

    async def scope_folder(self, scope: Optional[str] = ROOT) -> Optional[Card]:
        """The folder record for scope; None for root, a vanished id or a non-folder."""
        if scope is ROOT:
            return None
        card = await self.store.get(scope)
        if card is None or card.type != FOLDER:
            return None
        return card

    async def watch_children(self, scope: Optional[str] = ROOT) -> AsyncIterator[tuple[Card, ...]]:
        """Yield the current children, then a fresh snapshot after every change."""
        seen = self.signal.version
        yield await self.children(scope)
        while True:
            seen = await self.signal.wait_for_change(seen)
            logger.debug("Requery children of %s after %s", scope, self.signal.last_kind)
            yield await self.children(scope)

    async def watch_scope_folder(self, scope: Optional[str] = ROOT) -> AsyncIterator[Optional[Card]]:
        """Yield the scope's folder record (None for root or a vanished id) on every change."""
        seen = self.signal.version
        yield await self.scope_folder(scope)
        while True:
            seen = await self.signal.wait_for_change(seen)
            yield await self.scope_folder(scope)

    def close(self) -> None:
        self._unsubscribe()
