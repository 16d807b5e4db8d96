"""
MamanVoice Backend API
Local card board store, live board feed, media, and backup/restore.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import store
from api.routes import (
    audio_router,
    backup_router,
    board_router,
    cards_router,
    health_router,
    symbols_router,
)
from config import get_settings
from seeding import seed_defaults

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    card_store = store.get_card_store()
    if settings.MAMANVOICE_SEED:
        await seed_defaults(card_store)
    logger.info("MamanVoice ready: %d cards in %s", await card_store.count(), card_store.db_path)
    yield
    store.close()


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """422 without echoing the rejected input, which may not be JSON-serializable (NaN, Infinity)."""
    errors = [
        {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
        for e in exc.errors()
    ]
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=422, content={"detail": errors})


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.APP_TITLE, version=settings.APP_VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    for router in (
        health_router,
        board_router,
        cards_router,
        backup_router,
        audio_router,
        symbols_router,
    ):
        app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
