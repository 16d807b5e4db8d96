"""
Speech fallback for cards without recorded audio.
Google Cloud Text-to-Speech REST API; English and Malay voices.
When no API key is configured the caller is told so and speaks on-device instead.
"""
import base64
import logging

import requests

from config import get_settings

logger = logging.getLogger(__name__)

GOOGLE_TTS_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"

LANG_TO_CODE = {
    "en": "en-US",
    "ms": "ms-MY",
}
DEFAULT_LANG_CODE = "en-US"
MAX_TEXT_LENGTH = 5000  # Google limit per request
SPEAKING_RATE = 0.95    # slightly slower for a child listener


class TTSError(Exception):
    """Base for TTS failures with a user-friendly code."""
    def __init__(self, message: str, code: str = "tts_error"):
        self.message = message
        self.code = code
        super().__init__(message)


def is_configured() -> bool:
    return bool(get_settings().GOOGLE_TTS_API_KEY)


def _lang_code_for_lang(lang: str) -> str:
    lang_lower = (lang or "en").strip().lower()
    return LANG_TO_CODE.get(lang_lower, DEFAULT_LANG_CODE)


def _error_message(resp: requests.Response) -> str:
    try:
        err = resp.json()
        return err.get("error", {}).get("message", resp.text) or resp.text
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"


def synthesize_speech(text: str, lang: str = "en") -> bytes:
    """
    Speak a card label. Returns raw MP3 bytes.
    Raises TTSError with a code the route maps to an HTTP status.
    """
    settings = get_settings()

    if not text or not text.strip():
        raise TTSError("No text to speak.", code="tts_empty_text")

    if not settings.GOOGLE_TTS_API_KEY:
        raise TTSError("Text-to-speech is not configured. Missing GOOGLE_TTS_API_KEY.", code="tts_not_configured")

    clean_text = text.strip()[:MAX_TEXT_LENGTH]
    body = {
        "input": {"text": clean_text},
        "voice": {"languageCode": _lang_code_for_lang(lang)},
        "audioConfig": {"audioEncoding": "MP3", "speakingRate": SPEAKING_RATE},
    }

    try:
        resp = requests.post(
            GOOGLE_TTS_URL,
            params={"key": settings.GOOGLE_TTS_API_KEY},
            json=body,
            timeout=30,
        )
    except requests.exceptions.Timeout:
        logger.warning("Google TTS request timed out")
        raise TTSError("Speech synthesis timed out. Please try again.", code="tts_timeout")
    except requests.exceptions.ConnectionError as e:
        logger.warning("Google TTS connection error: %s", e)
        raise TTSError("Could not reach speech service. Check your connection.", code="tts_network")

    if resp.status_code in (401, 403):
        logger.warning("Google TTS %s: %s", resp.status_code, _error_message(resp))
        raise TTSError("Text-to-speech access denied. Check API key.", code="tts_unauthorized")
    if resp.status_code == 429:
        raise TTSError("Too many requests. Please wait a moment and try again.", code="tts_rate_limit")
    if resp.status_code >= 500:
        raise TTSError("Speech service is temporarily unavailable. Please try again later.", code="tts_server_error")
    if resp.status_code != 200:
        err_msg = _error_message(resp)
        logger.warning("Google TTS HTTP %s: %s", resp.status_code, err_msg)
        raise TTSError(f"Speech synthesis failed: {err_msg[:200]}", code="tts_api_error")

    try:
        b64 = resp.json().get("audioContent")
    except ValueError:
        logger.warning("Google TTS returned non-JSON body")
        raise TTSError("Invalid response from speech service.", code="tts_error")
    if not b64:
        raise TTSError("No audio returned from speech service.", code="tts_error")
    return base64.b64decode(b64)
