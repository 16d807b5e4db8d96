"""Card CRUD and per-card media (image / audio)."""

import logging
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response

from api.deps import get_lang, get_store, require_card
from api.helpers import card_summary, raise_board_error
from codec import decode_asset
from errors import AssetUnavailable, BoardError
from messages import t
from models import DEFAULT_MIME, Asset, Card, default_order, new_card_id
from repositories import SqliteCardStore
from schemas.requests import AssetPayload, CardCreate, CardUpdate
import tree

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cards", tags=["cards"])

AssetKind = Literal["image", "audio"]
MAX_ASSET_BYTES = 10 * 1024 * 1024


def _asset(payload: Optional[AssetPayload]) -> Optional[Asset]:
    if payload is None:
        return None
    try:
        return decode_asset(payload.base64, payload.type)
    except AssetUnavailable as e:
        raise HTTPException(400, detail={"code": "invalid_asset", "message": e.message})


def _card_from_body(card_id: str, body: CardCreate) -> Card:
    return Card(
        id=card_id,
        parent_id=body.parent_id,
        type=body.type,
        label=body.label,
        order=body.order if body.order is not None else default_order(),
        image=_asset(body.image),
        audio=_asset(body.audio),
    )


@router.post("", status_code=201)
async def create_card(
    body: CardCreate,
    card_store: Annotated[SqliteCardStore, Depends(get_store)],
    lang: Annotated[str, Depends(get_lang)],
):
    try:
        card = await tree.add_card(card_store, _card_from_body(new_card_id(), body))
    except BoardError as e:
        raise_board_error(e, lang)
    return JSONResponse(
        {"card": card_summary(card), "message": t("card.added", lang)},
        status_code=201,
    )


@router.get("/{card_id}")
async def get_card(card: Annotated[Card, Depends(require_card)]):
    return card_summary(card)


@router.put("/{card_id}")
async def replace_card(
    card_id: str,
    body: CardUpdate,
    card_store: Annotated[SqliteCardStore, Depends(get_store)],
    lang: Annotated[str, Depends(get_lang)],
):
    """Full-record replace; the body always carries the complete card."""
    try:
        card = await tree.update_card(card_store, _card_from_body(card_id, body))
    except BoardError as e:
        raise_board_error(e, lang)
    return {"card": card_summary(card), "message": t("card.updated", lang)}


@router.delete("/{card_id}")
async def delete_card(
    card_id: str,
    card_store: Annotated[SqliteCardStore, Depends(get_store)],
    lang: Annotated[str, Depends(get_lang)],
):
    try:
        deleted = await tree.delete_card(card_store, card_id)
    except BoardError as e:
        raise_board_error(e, lang)
    if not deleted:
        raise HTTPException(404, detail={"code": "card_not_found", "message": t("card_not_found", lang)})
    return {"deleted": card_id, "message": t("card.deleted", lang)}


@router.get("/{card_id}/{kind}")
async def get_asset(
    kind: AssetKind,
    card: Annotated[Card, Depends(require_card)],
    lang: Annotated[str, Depends(get_lang)],
):
    asset = getattr(card, kind)
    if asset is None:
        raise_board_error(AssetUnavailable(f"Card has no {kind}", card_id=card.id), lang)
    return Response(content=asset.data, media_type=asset.mime)


@router.put("/{card_id}/{kind}")
async def upload_asset(
    kind: AssetKind,
    card: Annotated[Card, Depends(require_card)],
    card_store: Annotated[SqliteCardStore, Depends(get_store)],
    file: UploadFile = File(..., description="Image or recorded audio (any MIME type)"),
):
    """Attach a captured recording or picked image to a card."""
    content = await file.read()
    if len(content) > MAX_ASSET_BYTES:
        raise HTTPException(413, detail={"code": "asset_too_large", "message": "File too large. Maximum 10 MB."})
    asset = Asset(data=content, mime=file.content_type or DEFAULT_MIME)
    updated = card.with_asset(kind, asset)
    await card_store.put(updated)
    logger.info("Stored %s for card %s (%.1f KB, %s)", kind, card.id, len(content) / 1024, asset.mime)
    return card_summary(updated)


@router.delete("/{card_id}/{kind}")
async def remove_asset(
    kind: AssetKind,
    card: Annotated[Card, Depends(require_card)],
    card_store: Annotated[SqliteCardStore, Depends(get_store)],
):
    updated = card.with_asset(kind, None)
    await card_store.put(updated)
    return card_summary(updated)
