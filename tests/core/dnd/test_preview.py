import pytest

from navtree_toolkit.core.dnd.preview import (
    calculate_insert_position,
    compute_preview_insert,
    get_items_with_preview,
    is_preview_item,
)
from navtree_toolkit.core.models import DraggedItem, PreviewInsert
from navtree_toolkit.core.tree.navigator import NavTree


def dragged(tree, node_id):
    located = tree.find_item_by_id(node_id)
    return DraggedItem(node_id, located.node, located.parent_id, located.index)


def ids(items):
    return [item.id for item in items]


def preview_level(tree, drag, insert, parent_id):
    return ids(
        get_items_with_preview(
            tree.get_siblings_at_level(parent_id), parent_id, drag, insert, tree.get_id
        )
    )


def test_before_sibling_in_same_group(simple_forest):
    tree = NavTree(simple_forest)
    drag = dragged(tree, "P2")

    insert = calculate_insert_position(drag, "P1", "before", tree)

    assert insert == PreviewInsert("G", 0)
    assert preview_level(tree, drag, insert, "G") == ["P2", "P1"]


def test_after_parent_group_moves_to_grandparent_level(simple_forest):
    tree = NavTree(simple_forest)
    drag = dragged(tree, "P1")

    insert = calculate_insert_position(drag, "G", "after", tree)

    assert insert == PreviewInsert("S", 1)
    assert preview_level(tree, drag, insert, "G") == ["P2"]
    assert preview_level(tree, drag, insert, "S") == ["G", "P1"]


def test_inside_container_lands_first(tree):
    drag = dragged(tree, "P7")
    assert calculate_insert_position(drag, "G3", "inside", tree) == PreviewInsert("G3", 0)


def test_inside_leaf_behaves_like_after(tree):
    drag = dragged(tree, "P1")
    assert calculate_insert_position(drag, "P3", "inside", tree) == PreviewInsert("S", 2)


@pytest.mark.parametrize("node_id", ["P1", "P2", "P3", "G", "P6"])
@pytest.mark.parametrize("position", ["before", "after"])
def test_degenerate_self_drop_keeps_index(tree, node_id, position):
    drag = dragged(tree, node_id)

    insert = calculate_insert_position(drag, node_id, position, tree)

    assert insert == PreviewInsert(drag.origin_parent_id, drag.origin_index)


def test_same_parent_forward_move_is_corrected(tree):
    drag = dragged(tree, "P1")
    # P2 sits at index 1; after removal of P1 the slot after it is 1.
    assert calculate_insert_position(drag, "P2", "after", tree) == PreviewInsert("G", 1)


def test_root_locked_sections(tree):
    drag = dragged(tree, "S2")

    assert calculate_insert_position(drag, "S", "before", tree) == PreviewInsert(None, 0)
    assert calculate_insert_position(drag, "S", "inside", tree) == PreviewInsert(None, 1)
    assert calculate_insert_position(drag, "G", "inside", tree) is None
    assert calculate_insert_position(drag, "P1", "after", tree) is None


def test_section_moved_after_later_section(tree):
    drag = dragged(tree, "S")
    assert calculate_insert_position(drag, "S2", "after", tree) == PreviewInsert(None, 1)


def test_missing_inputs_return_none(tree):
    drag = dragged(tree, "P1")
    assert calculate_insert_position(None, "P2", "before", tree) is None
    assert calculate_insert_position(drag, None, "before", tree) is None
    assert calculate_insert_position(drag, "P2", None, tree) is None
    assert calculate_insert_position(drag, "ghost", "before", tree) is None


def test_compute_preview_insert_respects_live_preview(tree):
    drag = dragged(tree, "P1")
    assert compute_preview_insert(False, drag, "P3", "before", tree) is None
    assert compute_preview_insert(True, drag, "P3", "before", tree) == PreviewInsert("S", 1)


class TestItemsWithPreview:
    """The dragged node appears exactly once across origin and destination levels."""

    @pytest.mark.parametrize(
        "node_id, target_id, position",
        [
            ("P2", "P1", "before"),  # origin == destination
            ("P1", "P3", "after"),  # G -> S
            ("P4", "G", "inside"),  # G2 -> G, different sections
            ("P7", "P5", "before"),  # root -> G3
            ("G3", "S", "after"),  # G2 -> root
        ],
    )
    def test_dragged_never_duplicated_or_dropped(self, tree, node_id, target_id, position):
        drag = dragged(tree, node_id)
        insert = calculate_insert_position(drag, target_id, position, tree)
        assert insert is not None

        occurrences = 0
        for parent_id in [None, "S", "G", "S2", "G2", "G3"]:
            occurrences += preview_level(tree, drag, insert, parent_id).count(node_id)

        assert occurrences == 1
        assert node_id in preview_level(tree, drag, insert, insert.parent_id)

    def test_unrelated_level_is_untouched(self, tree):
        drag = dragged(tree, "P1")
        insert = calculate_insert_position(drag, "P3", "after", tree)
        assert preview_level(tree, drag, insert, "S2") == ["G2", "P6"]

    def test_index_is_clamped(self, tree):
        drag = dragged(tree, "P7")
        assert preview_level(tree, drag, PreviewInsert("G", 99), "G") == ["P1", "P2", "P7"]

    def test_no_preview_returns_copy(self, tree):
        items = tree.get_siblings_at_level("G")
        result = get_items_with_preview(items, "G", None, None, tree.get_id)
        assert result == items
        assert result is not items


def test_is_preview_item_only_while_displaced(tree):
    drag = dragged(tree, "P1")

    assert not is_preview_item(True, drag, PreviewInsert("G", 0), "P1")
    assert is_preview_item(True, drag, PreviewInsert("S", 1), "P1")
    assert not is_preview_item(True, drag, PreviewInsert("S", 1), "P2")
    assert not is_preview_item(False, drag, PreviewInsert("S", 1), "P1")
