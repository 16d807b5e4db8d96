"""
MamanVoice backend configuration.
Single source of truth for environment and app settings.
"""

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

load_dotenv()


def get_settings():
    """Return app settings (use as FastAPI Depends or call directly)."""
    return Settings()


def _flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


class Settings:
    """Application settings loaded from environment."""

    # App
    APP_TITLE: str = "MamanVoice API"
    APP_VERSION: str = "1.0.0"
    BOARD_TITLE: str = "MamanVoice"
    ALLOWED_ORIGINS: list[str]

    # Storage: one SQLite file under the data dir
    MAMANVOICE_DATA_DIR: Path
    MAMANVOICE_DB_FILE: str = "cards.db"
    MAMANVOICE_SEED: bool = True

    # Operator-facing messages: "en" | "ms"
    DEFAULT_LANG: Literal["en", "ms"] = "en"

    # Speech fallback (Google Cloud Text-to-Speech)
    GOOGLE_TTS_API_KEY: str = ""

    # Symbol library: JSON list of {name, tags, svg}
    SYMBOLS_URL: str = ""

    def __init__(self):
        origins = os.environ.get("ALLOWED_ORIGINS", "http://localhost:5173")
        self.ALLOWED_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        data_dir = os.environ.get("MAMANVOICE_DATA_DIR", "data")
        self.MAMANVOICE_DATA_DIR = Path(data_dir)
        self.MAMANVOICE_DB_FILE = (os.environ.get("MAMANVOICE_DB_FILE") or "cards.db").strip()
        self.MAMANVOICE_SEED = _flag(os.environ.get("MAMANVOICE_SEED", "1"))
        lang = (os.environ.get("DEFAULT_LANG") or "en").strip().lower()
        self.DEFAULT_LANG = "ms" if lang == "ms" else "en"
        self.GOOGLE_TTS_API_KEY = (os.environ.get("GOOGLE_TTS_API_KEY") or "").strip()
        self.SYMBOLS_URL = (os.environ.get("SYMBOLS_URL") or "").strip()

    @property
    def db_path(self) -> Path:
        """SQLite file holding the card table."""
        return self.MAMANVOICE_DATA_DIR / self.MAMANVOICE_DB_FILE
