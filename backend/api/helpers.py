"""Shared helpers for API routes (card summaries, board payloads, error mapping)."""

from typing import NoReturn, Optional

from fastapi import HTTPException

from config import get_settings
from errors import BoardError
from messages import t
from models import Card


def card_summary(card: Card) -> dict:
    """Card metadata for API responses. Asset bytes are served separately."""
    return {
        "id": card.id,
        "parentId": card.parent_id,
        "type": card.type,
        "label": card.label,
        "order": card.order,
        "image": {"type": card.image.mime, "size": card.image.size, "url": f"/api/cards/{card.id}/image"}
        if card.image else None,
        "audio": {"type": card.audio.mime, "size": card.audio.size, "url": f"/api/cards/{card.id}/audio"}
        if card.audio else None,
        # Without recorded audio the client speaks the label
        "speech": "audio" if card.audio else "tts",
    }


def scope_title(scope: Optional[str], folder: Optional[Card], lang: str) -> str:
    """Header title: app name at root, folder label, or a generic fallback."""
    if scope is None:
        return get_settings().BOARD_TITLE
    if folder is None:
        return t("folder.generic", lang)
    return folder.label


def board_payload(scope: Optional[str], folder: Optional[Card], cards, lang: str) -> dict:
    return {
        "scope": scope,
        "title": scope_title(scope, folder, lang),
        "parentId": folder.parent_id if folder else None,
        "cards": [card_summary(c) for c in cards],
    }


def raise_board_error(err: BoardError, lang: str) -> NoReturn:
    """Map a domain error to an HTTPException with a localized operator message."""
    raise HTTPException(
        err.status_code,
        detail={"code": err.code, "message": t(err.code, lang), "reason": err.message},
    )
