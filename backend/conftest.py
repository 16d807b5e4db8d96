"""Shared pytest fixtures: a fresh SQLite card store per test."""

import asyncio

import pytest

from models import Card, new_card_id
from repositories import SqliteCardStore


def run(coro):
    return asyncio.run(coro)


def make_card(label="Card", card_type="speak", parent_id=None, order=1, **kw) -> Card:
    return Card(
        id=kw.pop("id", None) or new_card_id(),
        parent_id=parent_id,
        type=card_type,
        label=label,
        order=order,
        **kw,
    )


@pytest.fixture
def card_store(tmp_path):
    s = SqliteCardStore(tmp_path / "cards.db")
    yield s
    s.close()


@pytest.fixture
def client(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    import main
    import store

    monkeypatch.setenv("MAMANVOICE_SEED", "0")
    monkeypatch.setenv("GOOGLE_TTS_API_KEY", "")
    monkeypatch.setenv("SYMBOLS_URL", "")
    store.configure(tmp_path / "cards.db")
    with TestClient(main.app) as c:
        yield c
    store.close()
