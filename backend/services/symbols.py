"""
Symbol-image library.
Downloads a JSON list of {name, tags, svg} pictograms from SYMBOLS_URL once per
process and hands picked symbols to the store as image assets.
"""

import logging
import threading
from typing import Optional

import requests

from config import get_settings
from models import Asset

logger = logging.getLogger(__name__)

SVG_MIME = "image/svg+xml"

_cache: Optional[list[dict]] = None
_cache_lock = threading.Lock()


class SymbolError(Exception):
    """Symbol library failure with a user-friendly code."""
    def __init__(self, message: str, code: str = "symbols_error"):
        self.message = message
        self.code = code
        super().__init__(message)


def _valid_item(item) -> bool:
    return (
        isinstance(item, dict)
        and isinstance(item.get("name"), str)
        and isinstance(item.get("svg"), str)
    )


def load_symbols() -> list[dict]:
    """Return the cached library, downloading it on first use."""
    global _cache
    with _cache_lock:
        if _cache is not None:
            return _cache
        url = get_settings().SYMBOLS_URL
        if not url:
            raise SymbolError("Symbol library URL is not configured.", code="symbols_not_configured")
        try:
            resp = requests.get(url, timeout=15)
            resp.raise_for_status()
            items = resp.json()
        except requests.exceptions.RequestException as e:
            logger.warning("Symbol library download failed: %s", e)
            raise SymbolError("Failed to load symbols.", code="symbols_error")
        except ValueError:
            raise SymbolError("Symbol library is not valid JSON.", code="symbols_error")
        if not isinstance(items, list):
            raise SymbolError("Symbol library must be a list.", code="symbols_error")
        _cache = [
            {"name": i["name"], "tags": [str(t) for t in i.get("tags") or []], "svg": i["svg"]}
            for i in items
            if _valid_item(i)
        ]
        logger.info("Loaded %d symbols from %s", len(_cache), url)
        return _cache


def clear_cache() -> None:
    global _cache
    with _cache_lock:
        _cache = None


def search_symbols(query: str = "") -> list[dict]:
    """Case-insensitive match on name or any tag."""
    q = (query or "").strip().lower()
    symbols = load_symbols()
    if not q:
        return list(symbols)
    return [
        s for s in symbols
        if q in s["name"].lower() or any(q in tag.lower() for tag in s["tags"])
    ]


def symbol_asset(name: str) -> Asset:
    for s in load_symbols():
        if s["name"] == name:
            return Asset(data=s["svg"].encode("utf-8"), mime=SVG_MIME)
    raise SymbolError(f"No symbol named '{name}'.", code="symbol_not_found")
