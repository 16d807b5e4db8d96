"""
Voice API: play a card (recorded audio or TTS of its label) and raw synthesis.
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from api.deps import get_lang, require_card
from messages import t
from models import Card
from services.tts import TTSError, is_configured, synthesize_speech

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/audio", tags=["audio"])


class SynthesizeBody(BaseModel):
    text: str
    lang: str = "en"


def _tts_status(code: str) -> int:
    if code in ("tts_not_configured", "tts_timeout", "tts_network", "tts_server_error"):
        return 503
    if code == "tts_unauthorized":
        return 403
    if code == "tts_rate_limit":
        return 429
    return 400


def _speak(text: str, lang: str) -> Response:
    audio_bytes = synthesize_speech(text, lang=lang)
    return Response(
        content=audio_bytes,
        media_type="audio/mpeg",
        headers={"Content-Disposition": "inline; filename=speech.mp3"},
    )


@router.get("/cards/{card_id}/speak")
async def speak_card(
    card: Annotated[Card, Depends(require_card)],
    lang: Annotated[str, Depends(get_lang)],
):
    """
    Recorded audio when the card has it, else synthesized speech of the label.
    If synthesis is unavailable, answers 503 with `fallback_text` so the client
    can speak the label with the device voice.
    """
    if card.audio is not None:
        return Response(content=card.audio.data, media_type=card.audio.mime)
    try:
        return _speak(card.label, lang)
    except TTSError as e:
        logger.info("TTS unavailable for card %s: %s", card.id, e.code)
        message = t(e.code, lang) if e.code == "tts_not_configured" else e.message
        raise HTTPException(
            _tts_status(e.code),
            detail={"code": e.code, "message": message, "fallback_text": card.label},
        )


@router.post("/synthesize")
async def synthesize(body: SynthesizeBody):
    """
    Synthesize text to speech using Google Cloud TTS.
    Returns MP3 audio bytes or JSON error with code and detail.
    """
    if not body.text or not body.text.strip():
        raise HTTPException(400, detail={"code": "tts_empty_text", "message": "No text to speak."})
    try:
        return _speak(body.text.strip(), body.lang)
    except TTSError as e:
        raise HTTPException(_tts_status(e.code), detail={"code": e.code, "message": e.message})


@router.get("/status")
async def voice_status():
    """Whether server-side speech is configured. Does not validate the key."""
    return {"tts_available": is_configured()}
