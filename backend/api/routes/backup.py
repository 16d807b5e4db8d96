"""Backup export (download) and import (upload, full replace)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from api.deps import get_lang, get_store
from api.helpers import raise_board_error
from backup import BACKUP_MEDIA_TYPE, backup_filename, dump_backup, export_backup, import_backup
from errors import BoardError
from messages import t
from repositories import SqliteCardStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/backup", tags=["backup"])

MAX_BACKUP_BYTES = 200 * 1024 * 1024


@router.get("/export")
async def export(card_store: Annotated[SqliteCardStore, Depends(get_store)]):
    doc = await export_backup(card_store)
    content = dump_backup(doc)
    filename = backup_filename()
    logger.info("Backup %s: %d cards, %.1f KB", filename, len(doc["cards"]), len(content) / 1024)
    return Response(
        content=content,
        media_type=BACKUP_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
async def import_(
    card_store: Annotated[SqliteCardStore, Depends(get_store)],
    lang: Annotated[str, Depends(get_lang)],
    file: UploadFile = File(..., description="Backup JSON produced by /api/backup/export"),
):
    """
    Replace every card with the backup's cards.
    On any failure the board is left exactly as it was.
    Clients should reload all views afterwards (asset URLs point at new content).
    """
    try:
        content = await file.read()
    except Exception as e:
        logger.warning("Failed to read backup upload: %s", e)
        raise HTTPException(400, detail={"code": "invalid_backup", "message": t("invalid_backup", lang)})
    if len(content) > MAX_BACKUP_BYTES:
        raise HTTPException(413, detail={"code": "backup_too_large", "message": "Backup file too large."})

    try:
        count = await import_backup(card_store, content)
    except BoardError as e:
        logger.warning("Backup import rejected (%s): %s", e.code, e.message)
        raise_board_error(e, lang)
    return {"imported": count, "reload": True, "message": t("backup.imported", lang)}
