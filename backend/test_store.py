"""SQLite card store: CRUD, ordering, change notification, transactional replace."""

import sqlite3

import pytest

from conftest import make_card, run
from errors import CardExists
from models import Asset


def test_add_get_put_delete(card_store):
    card = make_card("Hi", image=Asset(b"\x89PNG", "image/png"))

    async def scenario():
        await card_store.add(card)
        assert await card_store.get(card.id) == card
        assert await card_store.count() == 1

        renamed = make_card("Hello", id=card.id, order=7)
        await card_store.put(renamed)
        got = await card_store.get(card.id)
        # full replace: the image slot was not supplied, so it is gone
        assert got.label == "Hello" and got.order == 7 and got.image is None

        assert await card_store.delete(card.id) is True
        assert await card_store.get(card.id) is None
        assert await card_store.delete(card.id) is False

    run(scenario())


def test_add_rejects_duplicate_id(card_store):
    card = make_card()
    run(card_store.add(card))
    with pytest.raises(CardExists):
        run(card_store.add(card))


def test_put_inserts_missing_card(card_store):
    card = make_card("New")
    run(card_store.put(card))
    assert run(card_store.get(card.id)) == card


def test_list_by_parent_and_type_orders_ascending(card_store):
    folder = make_card("Food", "folder")
    speak = [make_card(f"s{o}", parent_id=folder.id, order=o) for o in (3, 1, 2)]
    nested_folder = make_card("Fruit", "folder", parent_id=folder.id, order=9)

    async def scenario():
        await card_store.bulk_add([folder, *speak, nested_folder])
        got = await card_store.list_by_parent_and_type(folder.id, "speak")
        assert [c.label for c in got] == ["s1", "s2", "s3"]
        folders = await card_store.list_by_parent_and_type(folder.id, "folder")
        assert [c.label for c in folders] == ["Fruit"]
        roots = await card_store.list_by_parent_and_type(None, "folder")
        assert [c.id for c in roots] == [folder.id]

    run(scenario())


def test_equal_orders_keep_insertion_order(card_store):
    cards = [make_card(label, order=5) for label in ("b", "a", "c")]

    async def scenario():
        for c in cards:
            await card_store.add(c)
        # replacing a card must not move it
        await card_store.put(make_card("a2", id=cards[1].id, order=5))
        got = await card_store.list_by_parent_and_type(None, "speak")
        assert [c.label for c in got] == ["b", "a2", "c"]

    run(scenario())


def test_float_and_large_orders_round_trip(card_store):
    a = make_card("a", order=1.5)
    b = make_card("b", order=1_760_000_000_000)
    run(card_store.bulk_add([b, a]))
    got = run(card_store.list_by_parent_and_type(None, "speak"))
    assert [(c.label, c.order) for c in got] == [("a", 1.5), ("b", 1_760_000_000_000)]


def test_bulk_add_is_all_or_nothing(card_store):
    existing = make_card("kept")
    run(card_store.add(existing))
    with pytest.raises(CardExists):
        run(card_store.bulk_add([make_card("new"), make_card("dup", id=existing.id)]))
    assert run(card_store.count()) == 1


def test_replace_all_rolls_back_on_failure(card_store):
    old = [make_card("old1"), make_card("old2")]
    run(card_store.bulk_add(old))
    dup = make_card("x")
    with pytest.raises(CardExists):
        run(card_store.replace_all([make_card("new"), dup, dup]))
    assert sorted(c.label for c in run(card_store.list_all())) == ["old1", "old2"]

    run(card_store.replace_all([make_card("only")]))
    assert [c.label for c in run(card_store.list_all())] == ["only"]


def test_clear(card_store):
    run(card_store.bulk_add([make_card(), make_card()]))
    run(card_store.clear())
    assert run(card_store.count()) == 0


def test_mutations_notify_subscribers(card_store):
    kinds = []
    unsubscribe = card_store.subscribe(kinds.append)
    card = make_card()

    async def scenario():
        await card_store.add(card)
        await card_store.get(card.id)
        await card_store.put(card)
        await card_store.delete(card.id)
        await card_store.delete(card.id)  # no-op, no notification
        await card_store.bulk_add([make_card()])
        await card_store.replace_all([])
        await card_store.clear()

    run(scenario())
    assert kinds == ["add", "put", "delete", "bulk_add", "replace", "clear"]
    unsubscribe()
    run(card_store.add(make_card()))
    assert len(kinds) == 6


def test_failed_write_does_not_notify(card_store):
    card = make_card()
    run(card_store.add(card))
    kinds = []
    card_store.subscribe(kinds.append)
    with pytest.raises(CardExists):
        run(card_store.add(card))
    assert kinds == []


def test_data_survives_reopen(tmp_path):
    from repositories import SqliteCardStore

    path = tmp_path / "cards.db"
    s = SqliteCardStore(path)
    card = make_card("Persist", audio=Asset(bytes(range(256)), "audio/webm"))
    run(s.add(card))
    s.close()

    reopened = SqliteCardStore(path)
    try:
        assert run(reopened.get(card.id)) == card
    finally:
        reopened.close()


def test_nan_order_is_not_reported_as_duplicate(card_store):
    # NaN binds as NULL and trips NOT NULL, which is not an id conflict
    with pytest.raises(sqlite3.IntegrityError):
        run(card_store.add(make_card(order=float("nan"))))
    with pytest.raises(sqlite3.IntegrityError):
        run(card_store.bulk_add([make_card(order=float("nan"))]))
    assert run(card_store.count()) == 0
