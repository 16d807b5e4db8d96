"""FastAPI dependencies and require-helpers for routes."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query

import store
from config import get_settings
from live_query import LiveQueries
from messages import normalize_lang, t
from models import Card
from repositories import SqliteCardStore


def get_store() -> SqliteCardStore:
    """Return the process-wide card store. Use in Depends()."""
    return store.get_card_store()


def get_queries() -> LiveQueries:
    return store.get_live_queries()


def get_lang(lang: Annotated[str, Query()] = "") -> str:
    """Operator language from ?lang=, else the configured default."""
    return normalize_lang(lang or get_settings().DEFAULT_LANG)


async def require_card(
    card_id: str,
    card_store: Annotated[SqliteCardStore, Depends(get_store)],
    lang: Annotated[str, Depends(get_lang)],
) -> Card:
    """Load card by id or raise 404. Use as Depends(require_card) with card_id in path."""
    card = await card_store.get(card_id)
    if card is None:
        raise HTTPException(404, detail={"code": "card_not_found", "message": t("card_not_found", lang)})
    return card
