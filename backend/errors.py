"""
Board error taxonomy.
Every error carries a user-friendly message and a stable code; routes map the
code to an HTTP status and a localized operator message.
"""

from typing import Optional


class BoardError(Exception):
    """Base for recoverable board failures with a user-facing code."""

    status_code = 400

    def __init__(self, message: str, code: str = "board_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class CardNotFound(BoardError):
    status_code = 404

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card '{card_id}' not found", code="card_not_found")


class CardExists(BoardError):
    status_code = 409

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card '{card_id}' already exists", code="card_exists")


class FolderNotEmpty(BoardError):
    status_code = 409

    def __init__(self, folder_id: str, child_count: int):
        self.folder_id = folder_id
        self.child_count = child_count
        super().__init__(
            f"Folder '{folder_id}' still holds {child_count} card(s)",
            code="folder_not_empty",
        )


class InvalidParent(BoardError):
    def __init__(self, message: str):
        super().__init__(message, code="invalid_parent")


class InvalidBackup(BoardError):
    """Malformed or unsupported-version backup document. Nothing was written."""

    def __init__(self, message: str):
        super().__init__(message, code="invalid_backup")


class ImportFailed(BoardError):
    """Decode or storage failure during import. The prior table is kept."""

    status_code = 422

    def __init__(self, message: str):
        super().__init__(message, code="import_failed")


class AssetUnavailable(BoardError):
    status_code = 404

    def __init__(self, message: str, card_id: Optional[str] = None):
        self.card_id = card_id
        super().__init__(message, code="asset_unavailable")
