"""First-load default board."""

import logging

from models import FOLDER, SPEAK, Card, new_card_id
from repositories.base import StoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_CARDS = (
    (SPEAK, "Hi"),
    (SPEAK, "More"),
    (SPEAK, "Help"),
    (FOLDER, "Food"),
)


def default_cards() -> list[Card]:
    return [
        Card(id=new_card_id(), parent_id=None, type=card_type, label=label, order=i)
        for i, (card_type, label) in enumerate(DEFAULT_CARDS, start=1)
    ]


async def seed_defaults(store: StoreProtocol) -> bool:
    """Insert the default cards if the store is empty. Returns True if seeded."""
    existing = await store.count()
    if existing > 0:
        logger.debug("Skipping seed: store already holds %d cards", existing)
        return False
    cards = default_cards()
    await store.bulk_add(cards)
    logger.info("Seeded %d default cards", len(cards))
    return True
