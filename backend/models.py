"""
MamanVoice data model.
A Card is either a speak tile or a folder; the tree lives in parent_id only.
"""

import time
import uuid
from dataclasses import dataclass, replace
from typing import Literal, Optional, Union

CardType = Literal["speak", "folder"]
SPEAK: CardType = "speak"
FOLDER: CardType = "folder"
CARD_TYPES = (SPEAK, FOLDER)

DEFAULT_MIME = "application/octet-stream"

# Scope value for the top level of the board
ROOT = None

Number = Union[int, float]


def new_card_id() -> str:
    return str(uuid.uuid4())


def default_order() -> int:
    """New cards sort after existing ones: current epoch time in ms."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Asset:
    """A binary payload (image or audio) with its own MIME type."""

    data: bytes
    mime: str = DEFAULT_MIME

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Card:
    id: str
    parent_id: Optional[str]
    type: CardType
    label: str
    order: Number
    image: Optional[Asset] = None
    audio: Optional[Asset] = None

    @property
    def is_folder(self) -> bool:
        return self.type == FOLDER

    def with_asset(self, kind: str, asset: Optional[Asset]) -> "Card":
        """Return a copy with the image or audio slot replaced."""
        if kind not in ("image", "audio"):
            raise ValueError(f"Unknown asset kind: {kind}")
        return replace(self, **{kind: asset})
