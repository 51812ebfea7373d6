import threading

import pytest

from conftest import level_ids, page, structure
from navtree_toolkit.core.models import NavNode
from navtree_toolkit.core.services.undo_service import UndoService
from navtree_toolkit.core.tree.navigator import NavTree


@pytest.fixture
def service():
    return UndoService(max_history=3)


def reverse_root(tree):
    tree.set_data(list(reversed(tree.data)))


def test_push_snapshot_enforces_max_history(tree, service):
    service.push_snapshot(tree)  # 1
    reverse_root(tree)
    service.push_snapshot(tree)  # 2
    reverse_root(tree)
    service.push_snapshot(tree)  # 3
    reverse_root(tree)
    service.push_snapshot(tree)  # 4 -> trimmed to 3

    # Three snapshots allow two undos.
    assert service.undo(tree) is True
    assert service.undo(tree) is True
    assert service.undo(tree) is False


def test_undo_redo_roundtrip_restores_forest(tree, service):
    service.push_snapshot(tree)
    baseline = structure(tree.data)

    reverse_root(tree)
    tree.set_group_expanded("G", True)
    service.push_snapshot(tree)
    mutated = structure(tree.data)

    assert service.undo(tree) is True
    assert structure(tree.data) == baseline
    assert not tree.is_group_expanded("G")
    assert tree.is_group_expanded("G2")

    assert service.redo(tree) is True
    assert structure(tree.data) == mutated
    assert tree.is_group_expanded("G")


def test_can_undo_can_redo_transitions(tree, service):
    assert service.can_undo() is False
    assert service.can_redo() is False

    service.push_snapshot(tree)
    # A lone baseline has nothing to go back to.
    assert service.can_undo() is False

    reverse_root(tree)
    service.push_snapshot(tree)
    assert service.can_undo() is True
    assert service.can_redo() is False

    service.undo(tree)
    assert service.can_undo() is False
    assert service.can_redo() is True

    service.redo(tree)
    assert service.can_redo() is False

    service.undo(tree)
    service.push_snapshot(tree)
    assert service.can_redo() is False


def test_empty_stacks_return_false(tree, service):
    assert service.undo(tree) is False
    assert service.redo(tree) is False


def test_snapshots_are_isolated_from_later_edits(tree, service):
    service.push_snapshot(tree)
    tree.data[2].children.append(page("P8"))
    service.push_snapshot(tree)

    service.undo(tree)
    tree.data[2].children.append(page("P9"))
    service.redo(tree)

    assert level_ids(tree.data, "P7") == ["P8"]


def test_discard_last_drops_unused_baseline(tree, service):
    service.push_snapshot(tree)
    service.push_snapshot(tree)
    service.discard_last()

    assert service.can_undo() is False


def test_uncopyable_forest_is_skipped(service, caplog):
    tree = NavTree([NavNode(id="P", kind="page", label="P", meta={"lock": threading.Lock()})])

    service.push_snapshot(tree)

    assert service.can_undo() is False
    assert "Snapshot skipped" in caplog.text


def test_clear(tree, service):
    service.push_snapshot(tree)
    reverse_root(tree)
    service.push_snapshot(tree)
    service.undo(tree)

    service.clear()

    assert not service.can_undo() and not service.can_redo()
