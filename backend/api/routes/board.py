"""Board views: ordered children of a scope, as a snapshot or a live WebSocket feed."""

import asyncio
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from api.deps import get_lang, get_queries
from api.helpers import board_payload
from live_query import LiveQueries
from messages import normalize_lang

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/board", tags=["board"])


async def _snapshot(queries: LiveQueries, scope: Optional[str], lang: str) -> dict:
    folder = await queries.scope_folder(scope)
    cards = await queries.children(scope)
    return board_payload(scope, folder, cards, lang)


@router.get("")
async def root_board(
    queries: Annotated[LiveQueries, Depends(get_queries)],
    lang: Annotated[str, Depends(get_lang)],
):
    return await _snapshot(queries, None, lang)


async def _client_gone(websocket: WebSocket) -> None:
    """Drain client frames until the peer disconnects."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/ws")
async def live_board(
    websocket: WebSocket,
    queries: Annotated[LiveQueries, Depends(get_queries)],
    folder_id: Optional[str] = None,
    lang: str = "en",
):
    """Push the board for one scope now and after every store change, until the client leaves."""
    await websocket.accept()
    lang = normalize_lang(lang)
    logger.info("Live board opened for scope %s", folder_id or "root")
    updates = queries.watch_children(folder_id)
    gone = asyncio.ensure_future(_client_gone(websocket))
    snapshot = None
    try:
        while True:
            snapshot = asyncio.ensure_future(updates.__anext__())
            done, _ = await asyncio.wait({snapshot, gone}, return_when=asyncio.FIRST_COMPLETED)
            if snapshot not in done:
                break
            cards = snapshot.result()
            folder = await queries.scope_folder(folder_id)
            await websocket.send_json(board_payload(folder_id, folder, cards, lang))
    except WebSocketDisconnect:
        pass
    finally:
        gone.cancel()
        # The generator must be idle before it can be closed.
        if snapshot is not None and not snapshot.done():
            snapshot.cancel()
            await asyncio.wait({snapshot})
        await updates.aclose()
        logger.info("Live board closed for scope %s", folder_id or "root")


@router.get("/{folder_id}")
async def folder_board(
    folder_id: str,
    queries: Annotated[LiveQueries, Depends(get_queries)],
    lang: Annotated[str, Depends(get_lang)],
):
    """Children of a folder. A vanished folder yields an empty board with a generic title."""
    return await _snapshot(queries, folder_id, lang)
