"""Symbol library: search pictograms and attach one as a card image."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from api.deps import get_lang, get_store, require_card
from api.helpers import card_summary
from messages import t
from models import Card
from repositories import SqliteCardStore
from services.symbols import SVG_MIME, SymbolError, search_symbols, symbol_asset

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/symbols", tags=["symbols"])


def _raise(e: SymbolError, lang: str):
    status = {"symbols_not_configured": 503, "symbol_not_found": 404}.get(e.code, 502)
    raise HTTPException(status, detail={"code": e.code, "message": t(e.code, lang)})


@router.get("")
async def list_symbols(lang: Annotated[str, Depends(get_lang)], q: str = ""):
    try:
        found = search_symbols(q)
    except SymbolError as e:
        _raise(e, lang)
    return {"symbols": [{"name": s["name"], "tags": s["tags"]} for s in found]}


@router.get("/{name}")
async def get_symbol(name: str, lang: Annotated[str, Depends(get_lang)]):
    try:
        asset = symbol_asset(name)
    except SymbolError as e:
        _raise(e, lang)
    return Response(content=asset.data, media_type=SVG_MIME)


@router.post("/{name}/attach/{card_id}")
async def attach_symbol(
    name: str,
    card: Annotated[Card, Depends(require_card)],
    card_store: Annotated[SqliteCardStore, Depends(get_store)],
    lang: Annotated[str, Depends(get_lang)],
):
    try:
        asset = symbol_asset(name)
    except SymbolError as e:
        _raise(e, lang)
    updated = card.with_asset("image", asset)
    await card_store.put(updated)
    logger.info("Attached symbol %r to card %s", name, card.id)
    return card_summary(updated)
