"""
Asset codec: binary asset <-> base64 text for embedding in backup JSON.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Optional

from errors import AssetUnavailable
from models import DEFAULT_MIME, Asset

# Characters atob() skips: space, tab, LF, FF, CR.
_ASCII_WHITESPACE = str.maketrans("", "", " \t\n\f\r")


@dataclass(frozen=True)
class EncodedAsset:
    text: str
    mime: str = DEFAULT_MIME

    def to_dict(self) -> dict:
        return {"base64": self.text, "type": self.mime}

    @classmethod
    def from_dict(cls, d: dict) -> "EncodedAsset":
        if not isinstance(d, dict) or not isinstance(d.get("base64"), str):
            raise AssetUnavailable("Asset entry has no base64 payload")
        mime = d.get("type")
        return cls(text=d["base64"], mime=mime if isinstance(mime, str) and mime else DEFAULT_MIME)


def encode_asset(data: bytes, mime: Optional[str] = None) -> EncodedAsset:
    return EncodedAsset(
        text=base64.b64encode(bytes(data)).decode("ascii"),
        mime=mime or DEFAULT_MIME,
    )


def _split_data_url(text: str) -> tuple[str, Optional[str]]:
    """Strip a 'data:<mime>;base64,' prefix as produced by browser readers."""
    if not text.startswith("data:") or "," not in text:
        return text, None
    header, payload = text.split(",", 1)
    mime = header[len("data:"):].split(";", 1)[0]
    return payload, mime or None


def decode_asset(text: str, mime: Optional[str] = None) -> Asset:
    """Decode base64 text back to an Asset. Raises AssetUnavailable if corrupt."""
    if not isinstance(text, str):
        raise AssetUnavailable("Asset payload is not text")
    payload, url_mime = _split_data_url(text.strip(" \t\n\f\r"))
    payload = payload.translate(_ASCII_WHITESPACE)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AssetUnavailable(f"Corrupt base64 asset: {e}") from e
    return Asset(data=data, mime=mime or url_mime or DEFAULT_MIME)


def encode_optional(asset: Optional[Asset]) -> Optional[dict]:
    """Wire form of an optional asset: {"base64", "type"} or None."""
    if asset is None:
        return None
    return encode_asset(asset.data, asset.mime).to_dict()


def decode_optional(d: Optional[dict]) -> Optional[Asset]:
    if d is None:
        return None
    enc = EncodedAsset.from_dict(d)
    return decode_asset(enc.text, enc.mime)
