from navtree_toolkit.core.utils import (
    count_items,
    find_page_by_href,
    get_all_group_ids,
    get_all_pages,
    get_item_depth,
    get_item_path,
    is_item_descendant_of,
)


class TestForestQueries:
    """Whole-forest helpers over the shared sample navigation."""

    def test_pages_in_document_order(self, forest):
        assert [p.id for p in get_all_pages(forest)] == ["P1", "P2", "P3", "P4", "P5", "P6", "P7"]

    def test_find_page_by_href(self, forest):
        assert find_page_by_href(forest, "/p5").id == "P5"
        assert find_page_by_href(forest, "/missing") is None

    def test_group_ids_exclude_sections(self, forest):
        assert get_all_group_ids(forest) == ["G", "G2", "G3"]

    def test_count_items(self, forest):
        counts = count_items(forest)
        assert (counts.pages, counts.groups, counts.total) == (7, 3, 10)

    def test_empty_forest(self):
        assert get_all_pages([]) == []
        assert count_items([]).total == 0


class TestItemPaths:
    def test_path_lists_groups_only(self, forest):
        assert get_item_path(forest, "P5") == ["G2", "G3"]
        assert get_item_path(forest, "P3") == []
        assert get_item_path(forest, "unknown") == []

    def test_depth_counts_groups(self, forest):
        assert get_item_depth(forest, "P5") == 2
        assert get_item_depth(forest, "P1") == 1
        assert get_item_depth(forest, "P7") == 0

    def test_descendant_check(self, forest):
        assert is_item_descendant_of(forest, "P5", "G2")
        assert not is_item_descendant_of(forest, "P1", "G2")
        # A node is not its own descendant here.
        assert not is_item_descendant_of(forest, "G2", "G2")
