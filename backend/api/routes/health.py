from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from api.deps import get_lang
from config import get_settings
from messages import MESSAGES

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    settings = get_settings()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
    }


@router.get("/api/messages")
async def messages(lang: Annotated[str, Depends(get_lang)]):
    """Operator message catalog for the client's language."""
    return {"lang": lang, "messages": MESSAGES[lang]}
