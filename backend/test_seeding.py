"""Seeding and the full seed -> export -> clear -> import scenario."""

from backup import dump_backup, export_backup, import_backup
from conftest import make_card, run
from live_query import LiveQueries
from seeding import DEFAULT_CARDS, seed_defaults


def test_seed_inserts_defaults_once(card_store):
    assert run(seed_defaults(card_store)) is True
    cards = run(card_store.list_all())
    assert [(c.type, c.label) for c in cards] == list(DEFAULT_CARDS)
    assert [c.order for c in cards] == [1, 2, 3, 4]
    assert all(c.parent_id is None for c in cards)

    assert run(seed_defaults(card_store)) is False
    assert run(card_store.count()) == len(DEFAULT_CARDS)


def test_seed_skipped_when_any_card_exists(card_store):
    run(card_store.add(make_card("Unrelated", order=99)))
    assert run(seed_defaults(card_store)) is False
    assert [c.label for c in run(card_store.list_all())] == ["Unrelated"]


def test_seed_export_clear_import_round_trip(card_store):
    queries = LiveQueries(card_store)

    async def scenario():
        await seed_defaults(card_store)
        board = await queries.children(None)
        assert [c.label for c in board] == ["Food", "Hi", "More", "Help"]

        doc = await export_backup(card_store)
        assert doc["version"] == 1
        assert len(doc["cards"]) == 4
        text = dump_backup(doc)

        await card_store.clear()
        assert await queries.children(None) == ()

        assert await import_backup(card_store, text) == 4
        restored = await queries.children(None)
        assert [(c.id, c.label) for c in restored] == [(c.id, c.label) for c in board]

    run(scenario())
