"""
Operator-facing messages (English and Malay).
Keys are error codes or outcome names; unknown languages fall back to English
and unknown keys to the key itself.
"""

SUPPORTED_LANGS = ("en", "ms")

MESSAGES = {
    "en": {
        "app.title": "MamanVoice",
        "folder.generic": "Folder",
        "card.added": "Added",
        "card.updated": "Updated",
        "card.deleted": "Deleted",
        "backup.exported": "Backup exported",
        "backup.imported": "Backup imported",
        "folder_not_empty": "This folder has cards inside. Delete them first.",
        "invalid_backup": "Invalid backup file",
        "import_failed": "Could not import backup",
        "asset_unavailable": "This card has no such image or audio.",
        "card_not_found": "Card not found",
        "card_exists": "A card with this id already exists.",
        "invalid_parent": "Cards can only be placed inside an existing folder.",
        "tts_not_configured": "Speech is not available; the device voice will be used.",
        "symbols_not_configured": "The symbol library is not set up.",
        "symbols_error": "Failed to load symbols. Please check internet.",
        "symbol_not_found": "No symbol found with that name.",
        "warning.local": "Warning: Data is saved LOCALLY. Export backup (in Settings) to save progress.",
    },
    "ms": {
        "app.title": "MamanVoice",
        "folder.generic": "Folder",
        "card.added": "Ditambah",
        "card.updated": "Dikemaskini",
        "card.deleted": "Dibuang",
        "backup.exported": "Sandaran dieksport",
        "backup.imported": "Sandaran diimport",
        "folder_not_empty": "Folder ini ada kad di dalamnya. Padam kad dahulu.",
        "invalid_backup": "Fail sandaran tidak sah",
        "import_failed": "Gagal mengimport sandaran",
        "asset_unavailable": "Kad ini tiada gambar atau audio tersebut.",
        "card_not_found": "Kad tidak dijumpai",
        "card_exists": "Kad dengan id ini sudah wujud.",
        "invalid_parent": "Kad hanya boleh diletakkan di dalam folder yang wujud.",
        "tts_not_configured": "Suara tidak tersedia; suara peranti akan digunakan.",
        "symbols_not_configured": "Pustaka simbol belum disediakan.",
        "symbols_error": "Gagal memuat turun simbol. Sila semak internet.",
        "symbol_not_found": "Tiada simbol dijumpai dengan nama itu.",
        "warning.local": "Amaran: Data disimpan SECARA LOKAL. Eksport sandaran (dalam Tetapan) untuk simpan.",
    },
}


def normalize_lang(lang: str) -> str:
    lang_lower = (lang or "en").strip().lower()
    return lang_lower if lang_lower in SUPPORTED_LANGS else "en"


def t(key: str, lang: str = "en") -> str:
    table = MESSAGES[normalize_lang(lang)]
    return table.get(key) or MESSAGES["en"].get(key) or key
