"""Request body models for MamanVoice API."""

import math
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class AssetPayload(BaseModel):
    """A binary asset in backup wire form."""
    base64: str
    type: str = "application/octet-stream"


class CardCreate(BaseModel):
    label: str
    type: Literal["speak", "folder"] = "speak"
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    order: Optional[Union[int, float]] = None
    image: Optional[AssetPayload] = None
    audio: Optional[AssetPayload] = None

    model_config = {"populate_by_name": True}

    @field_validator("label")
    @classmethod
    def label_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("label must not be empty")
        return v

    @field_validator("order")
    @classmethod
    def order_finite(cls, v):
        if v is not None and not math.isfinite(v):
            raise ValueError("order must be a finite number")
        return v


class CardUpdate(CardCreate):
    """Full-record replace: omitted image/audio clear the slot."""
    order: Union[int, float]
