from conftest import page, section
from navtree_toolkit.core.tree.navigator import NavTree


def test_initial_expansion_from_defaults_and_overrides(forest):
    tree = NavTree(forest, expanded_groups={"G": True, "G2": False})

    assert tree.is_group_expanded("G")
    assert not tree.is_group_expanded("G2")
    assert not tree.is_group_expanded("G3")


def test_queries_go_through_cached_index(tree):
    first = tree.index
    assert tree.index is first

    located = tree.find_item_by_id("P4")
    assert located.parent_id == "G2"
    assert located.index == 0
    assert tree.calculate_depth("G2") == 1
    assert tree.is_descendant_of("P5", "S2")
    assert tree.get_ancestor_path("P5") == ["S2", "G2", "G3"]
    assert tree.find_path_to_item("P5") == ["G2", "G3"]


def test_set_data_rebuilds_index_and_keeps_expansion(tree):
    tree.set_group_expanded("G", True)
    old_index = tree.index

    tree.set_data([section("S", page("P1"))])

    assert tree.index is not old_index
    assert tree.find_item_by_id("P4") is None
    assert tree.find_item_by_id("P1").parent_id == "S"
    assert tree.is_group_expanded("G")


def test_invalidate_after_in_place_mutation(tree):
    tree.index
    tree.data[0].children.append(page("NEW"))
    assert tree.find_item_by_id("NEW") is None

    tree.invalidate_tree_index()

    assert tree.find_item_by_id("NEW").parent_id == "S"


def test_siblings_at_level(tree):
    assert [n.id for n in tree.get_siblings_at_level(None)] == ["S", "S2", "P7"]
    assert [n.id for n in tree.get_siblings_at_level("G")] == ["P1", "P2"]
    assert tree.get_siblings_at_level("P1") == []
    assert tree.get_siblings_at_level("unknown") == []


def test_toggle_and_expand_path(tree):
    assert tree.toggle_group("G") is True
    assert tree.toggle_group("G") is False

    opened = tree.expand_path_to("P5")

    assert opened == ["G3"]
    assert set(tree.expanded_group_ids()) == {"G2", "G3"}
    assert tree.expand_path_to("P5") == []


def test_load_expanded_groups_adds_to_existing(tree):
    tree.load_expanded_groups(["G", "G3"])
    assert set(tree.expanded_group_ids()) == {"G", "G2", "G3"}
