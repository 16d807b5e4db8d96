"""Pydantic schemas for API request/response."""

from .requests import (
    AssetPayload,
    CardCreate,
    CardUpdate,
)

__all__ = [
    "AssetPayload",
    "CardCreate",
    "CardUpdate",
]
