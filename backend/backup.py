"""
Backup export / import.

Document format (UTF-8 JSON):
  {
    "version": 1,
    "exportedAt": "<ISO-8601>",
    "cards": [
      {"id", "parentId", "type", "label", "order",
       "image": {"base64", "type"} | null,
       "audio": {"base64", "type"} | null}
    ]
  }

Import replaces the whole table in one transaction: either the previous cards
stay untouched or the backup is fully installed.
"""

import json
import logging
import math
from datetime import datetime, timezone
from typing import Optional, Union

from codec import decode_optional, encode_optional
from errors import AssetUnavailable, BoardError, ImportFailed, InvalidBackup
from models import CARD_TYPES, Card
from repositories.base import StoreProtocol

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1
BACKUP_MEDIA_TYPE = "application/json"


def backup_filename(now: Optional[datetime] = None) -> str:
    """Suggested file name: aac-backup-<year>-<month>-<day>_<hour><minute>.json"""
    now = now or datetime.now()
    return f"aac-backup-{now:%Y-%m-%d_%H%M}.json"


def card_to_backup(card: Card) -> dict:
    return {
        "id": card.id,
        "parentId": card.parent_id,
        "type": card.type,
        "label": card.label,
        "order": card.order,
        "image": encode_optional(card.image),
        "audio": encode_optional(card.audio),
    }


async def export_backup(store: StoreProtocol, now: Optional[datetime] = None) -> dict:
    """Snapshot every card, assets base64-encoded."""
    cards = await store.list_all()
    exported_at = (now or datetime.now(timezone.utc)).isoformat()
    logger.info("Exporting backup: %d cards", len(cards))
    return {
        "version": BACKUP_VERSION,
        "exportedAt": exported_at,
        "cards": [card_to_backup(c) for c in cards],
    }


def dump_backup(doc: dict) -> bytes:
    return json.dumps(doc, ensure_ascii=False, allow_nan=False).encode("utf-8")


def _is_supported_version(version) -> bool:
    return (
        isinstance(version, (int, float))
        and not isinstance(version, bool)
        and version == BACKUP_VERSION
    )


def _card_from_backup(entry: dict, index: int) -> Card:
    card_id = entry.get("id")
    if not isinstance(card_id, str) or not card_id:
        raise ImportFailed(f"Card #{index} has no id")
    card_type = entry.get("type")
    if card_type not in CARD_TYPES:
        raise ImportFailed(f"Card '{card_id}' has unknown type {card_type!r}")
    label = entry.get("label")
    if not isinstance(label, str):
        raise ImportFailed(f"Card '{card_id}' has no label")
    order = entry.get("order")
    if not isinstance(order, (int, float)) or isinstance(order, bool):
        raise ImportFailed(f"Card '{card_id}' has no numeric order")
    if not math.isfinite(order):
        raise ImportFailed(f"Card '{card_id}' has a non-finite order")
    parent_id = entry.get("parentId")
    if parent_id is not None and not isinstance(parent_id, str):
        raise ImportFailed(f"Card '{card_id}' has an invalid parentId")
    try:
        image = decode_optional(entry.get("image"))
        audio = decode_optional(entry.get("audio"))
    except AssetUnavailable as e:
        raise ImportFailed(f"Card '{card_id}': {e.message}") from e
    return Card(
        id=card_id,
        parent_id=parent_id,
        type=card_type,
        label=label,
        order=order,
        image=image,
        audio=audio,
    )


def parse_backup(text: Union[str, bytes]) -> list[Card]:
    """Validate a backup document and decode its cards. Touches no storage."""
    try:
        doc = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise InvalidBackup(f"Backup is not valid JSON: {e}") from e
    if not isinstance(doc, dict):
        raise InvalidBackup("Backup must be a JSON object")
    if not _is_supported_version(doc.get("version")):
        raise InvalidBackup(f"Unsupported backup version: {doc.get('version')!r}")
    entries = doc.get("cards")
    if not isinstance(entries, list):
        raise InvalidBackup("Backup has no cards list")
    if not all(isinstance(e, dict) for e in entries):
        raise InvalidBackup("Backup cards must be objects")
    return [_card_from_backup(e, i) for i, e in enumerate(entries)]


async def import_backup(store: StoreProtocol, text: Union[str, bytes]) -> int:
    """Replace every card with the backup's cards. Returns the imported count.

    Raises InvalidBackup or ImportFailed; in both cases the store is unchanged.
    """
    cards = parse_backup(text)
    try:
        await store.replace_all(cards)
    except BoardError as e:
        raise ImportFailed(e.message) from e
    except Exception as e:
        logger.exception("Backup import failed: %s", e)
        raise ImportFailed(f"Could not store backup: {e}") from e
    logger.info("Imported backup: %d cards", len(cards))
    return len(cards)
