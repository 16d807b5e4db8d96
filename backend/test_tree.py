"""Hierarchy guards: delete blocking, parent checks, cycles."""

from dataclasses import replace

import pytest

import tree
from conftest import make_card, run
from errors import CardNotFound, FolderNotEmpty, InvalidParent


def test_non_empty_folder_cannot_be_deleted(card_store):
    folder = make_card("Food", "folder")
    child = make_card("Apple", parent_id=folder.id)
    run(card_store.bulk_add([folder, child]))

    with pytest.raises(FolderNotEmpty) as exc:
        run(tree.delete_card(card_store, folder.id))
    assert exc.value.child_count == 1
    assert run(card_store.get(folder.id)) == folder
    assert run(card_store.get(child.id)) == child

    assert run(tree.delete_card(card_store, child.id)) is True
    assert run(tree.delete_card(card_store, folder.id)) is True
    assert run(card_store.count()) == 0


def test_nested_folder_counts_as_child(card_store):
    outer = make_card("Outer", "folder")
    inner = make_card("Inner", "folder", parent_id=outer.id)
    run(card_store.bulk_add([outer, inner]))
    with pytest.raises(FolderNotEmpty):
        run(tree.delete_card(card_store, outer.id))
    assert run(tree.delete_card(card_store, inner.id)) is True


def test_delete_missing_card_returns_false(card_store):
    assert run(tree.delete_card(card_store, "nope")) is False


def test_blocked_delete_does_not_notify(card_store):
    folder = make_card("Food", "folder")
    run(card_store.bulk_add([folder, make_card("Apple", parent_id=folder.id)]))
    kinds = []
    card_store.subscribe(kinds.append)
    with pytest.raises(FolderNotEmpty):
        run(tree.delete_card(card_store, folder.id))
    assert kinds == []


def test_add_card_requires_existing_folder_parent(card_store):
    speak = make_card("Hi")
    run(card_store.add(speak))
    with pytest.raises(InvalidParent):
        run(tree.add_card(card_store, make_card("x", parent_id="missing")))
    with pytest.raises(InvalidParent):
        run(tree.add_card(card_store, make_card("x", parent_id=speak.id)))

    folder = make_card("Food", "folder")
    run(tree.add_card(card_store, folder))
    child = run(tree.add_card(card_store, make_card("Rice", parent_id=folder.id)))
    assert run(card_store.get(child.id)).parent_id == folder.id


def test_update_card_rejects_cycles(card_store):
    a = make_card("A", "folder")
    b = make_card("B", "folder", parent_id=a.id)
    c = make_card("C", "folder", parent_id=b.id)
    run(card_store.bulk_add([a, b, c]))

    with pytest.raises(InvalidParent):
        run(tree.update_card(card_store, replace(a, parent_id=a.id)))
    with pytest.raises(InvalidParent):
        run(tree.update_card(card_store, replace(a, parent_id=c.id)))
    assert run(card_store.get(a.id)).parent_id is None

    # moving a leaf folder to root is fine
    run(tree.update_card(card_store, replace(c, parent_id=None)))
    assert run(card_store.get(c.id)).parent_id is None


def test_update_card_unknown_id(card_store):
    with pytest.raises(CardNotFound):
        run(tree.update_card(card_store, make_card("ghost")))


def test_non_empty_folder_cannot_become_speak(card_store):
    folder = make_card("Food", "folder")
    run(card_store.bulk_add([folder, make_card("Apple", parent_id=folder.id)]))
    with pytest.raises(FolderNotEmpty):
        run(tree.update_card(card_store, replace(folder, type="speak")))
    empty = make_card("Toys", "folder")
    run(card_store.add(empty))
    run(tree.update_card(card_store, replace(empty, type="speak")))
    assert run(card_store.get(empty.id)).type == "speak"


def test_update_keeps_full_record_semantics(card_store):
    card = make_card("Hi", order=3)
    run(card_store.add(card))
    run(tree.update_card(card_store, replace(card, label="Hello")))
    assert run(card_store.get(card.id)) == replace(card, label="Hello")
