"""Live queries: folder-then-speak ordering and re-emission on change."""

import asyncio

from conftest import make_card, run
from live_query import ChangeSignal, LiveQueries


def test_children_folders_first_then_speak(card_store):
    parent = make_card("Food", "folder")
    cards = [
        make_card("f5", "folder", parent_id=parent.id, order=5),
        make_card("s3", parent_id=parent.id, order=3),
        make_card("f1", "folder", parent_id=parent.id, order=1),
        make_card("s2", parent_id=parent.id, order=2),
    ]
    run(card_store.bulk_add([parent, *cards]))
    queries = LiveQueries(card_store)
    got = run(queries.children(parent.id))
    assert isinstance(got, tuple)
    assert [c.label for c in got] == ["f1", "f5", "s2", "s3"]
    assert [c.label for c in run(queries.children(None))] == ["Food"]


def test_scope_folder(card_store):
    folder = make_card("Food", "folder")
    run(card_store.add(folder))
    queries = LiveQueries(card_store)
    assert run(queries.scope_folder(None)) is None
    assert run(queries.scope_folder(folder.id)) == folder
    assert run(queries.scope_folder("gone")) is None


def test_watch_children_reemits_after_mutation(card_store):
    queries = LiveQueries(card_store)

    async def scenario():
        feed = queries.watch_children(None)
        first = await feed.__anext__()
        assert first == ()

        card = make_card("Hi")
        next_snapshot = asyncio.ensure_future(feed.__anext__())
        await asyncio.sleep(0)
        await card_store.add(card)
        second = await asyncio.wait_for(next_snapshot, timeout=5)
        assert [c.id for c in second] == [card.id]
        # earlier snapshot is untouched
        assert first == ()

        pending = asyncio.ensure_future(feed.__anext__())
        await card_store.delete(card.id)
        assert await asyncio.wait_for(pending, timeout=5) == ()
        await feed.aclose()

    run(scenario())


def test_watch_scope_folder_goes_none_when_deleted(card_store):
    folder = make_card("Food", "folder")
    run(card_store.add(folder))
    queries = LiveQueries(card_store)

    async def scenario():
        feed = queries.watch_scope_folder(folder.id)
        assert (await feed.__anext__()).label == "Food"
        pending = asyncio.ensure_future(feed.__anext__())
        await card_store.delete(folder.id)
        assert await asyncio.wait_for(pending, timeout=5) is None
        await feed.aclose()

    run(scenario())


def test_replace_invalidates_open_views(card_store):
    run(card_store.add(make_card("old")))
    queries = LiveQueries(card_store)

    async def scenario():
        feed = queries.watch_children(None)
        assert [c.label for c in await feed.__anext__()] == ["old"]
        pending = asyncio.ensure_future(feed.__anext__())
        await card_store.replace_all([make_card("new")])
        assert [c.label for c in await asyncio.wait_for(pending, timeout=5)] == ["new"]
        assert queries.signal.last_kind == "replace"
        await feed.aclose()

    run(scenario())


def test_change_signal_wait_returns_immediately_when_stale():
    signal = ChangeSignal()
    signal.notify("put")
    assert run(signal.wait_for_change(0)) == 1


def test_change_signal_coalesces_notifications():
    signal = ChangeSignal()

    async def scenario():
        waiter = asyncio.ensure_future(signal.wait_for_change(0))
        await asyncio.sleep(0)
        signal.notify("add")
        signal.notify("put")
        assert await asyncio.wait_for(waiter, timeout=5) == 2

    run(scenario())


def test_close_stops_notifications(card_store):
    queries = LiveQueries(card_store)
    queries.close()
    run(card_store.add(make_card()))
    assert queries.signal.version == 0


def test_scope_folder_ignores_speak_cards(card_store):
    speak = make_card("Hi")
    run(card_store.add(speak))
    assert run(LiveQueries(card_store).scope_folder(speak.id)) is None


def test_cancelled_watch_releases_its_waiter(card_store):
    queries = LiveQueries(card_store)

    async def scenario():
        feed = queries.watch_children(None)
        await feed.__anext__()
        pending = asyncio.ensure_future(feed.__anext__())
        await asyncio.sleep(0)
        assert len(queries.signal._waiters) == 1
        pending.cancel()
        await asyncio.wait({pending})
        await feed.aclose()
        assert not queries.signal._waiters

    run(scenario())
