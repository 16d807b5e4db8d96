"""
Hierarchy guards around store mutations.

The store itself accepts any parent_id (an import may leave orphans); writes made
through these helpers keep the tree valid:
  - a folder with children cannot be deleted (rejected, never cascaded)
  - a parent must be an existing folder
  - a card cannot end up under itself or one of its descendants

The check-then-act sequences assume a single local writer.
"""

import logging
from typing import Optional

from errors import CardNotFound, FolderNotEmpty, InvalidParent
from models import FOLDER, Card
from repositories.base import StoreProtocol

logger = logging.getLogger(__name__)


async def delete_card(store: StoreProtocol, card_id: str) -> bool:
    """Delete a card; raise FolderNotEmpty for a folder that still has children.

    Returns False when there is no such card.
    """
    card = await store.get(card_id)
    if card is None:
        return False
    if card.type == FOLDER:
        children = await store.list_by_parent(card.id)
        if children:
            logger.info("Refusing to delete folder %s: %d children", card.id, len(children))
            raise FolderNotEmpty(card.id, len(children))
    return await store.delete(card.id)


async def check_parent(
    store: StoreProtocol, parent_id: Optional[str], card_id: Optional[str] = None
) -> None:
    if parent_id is None:
        return
    if card_id is not None and parent_id == card_id:
        raise InvalidParent("A card cannot be its own parent")
    parent = await store.get(parent_id)
    if parent is None:
        raise InvalidParent(f"Parent folder '{parent_id}' does not exist")
    if parent.type != FOLDER:
        raise InvalidParent(f"Parent '{parent_id}' is not a folder")
    if card_id is None:
        return
    # Walk up from the new parent; meeting card_id means a cycle.
    seen = {parent.id}
    current = parent
    while current.parent_id is not None:
        if current.parent_id == card_id:
            raise InvalidParent("A folder cannot be moved inside itself")
        if current.parent_id in seen:
            break
        seen.add(current.parent_id)
        current = await store.get(current.parent_id)
        if current is None:
            break


async def add_card(store: StoreProtocol, card: Card) -> Card:
    await check_parent(store, card.parent_id)
    await store.add(card)
    logger.info("Added %s card %s (%r)", card.type, card.id, card.label)
    return card


async def update_card(store: StoreProtocol, card: Card) -> Card:
    """Full-record replace of an existing card."""
    existing = await store.get(card.id)
    if existing is None:
        raise CardNotFound(card.id)
    if existing.parent_id != card.parent_id:
        await check_parent(store, card.parent_id, card.id)
    if existing.type == FOLDER and card.type != FOLDER:
        children = await store.list_by_parent(card.id)
        if children:
            raise FolderNotEmpty(card.id, len(children))
    await store.put(card)
    logger.info("Updated card %s", card.id)
    return card
