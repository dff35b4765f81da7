"""Tests for role and search filters."""

from itertools import combinations

import pytest
from isomenu.core.filters import filter_by_role, filter_by_search, normalize_text
from isomenu.core.menu import Divider, MenuNode, iter_items

from tests.menu_builders import make_item, route_ids

ROLE_UNIVERSE = ("admin", "manager", "user")


def _all_role_sets() -> list[frozenset[str]]:
    return [
        frozenset(combo)
        for size in range(len(ROLE_UNIVERSE) + 1)
        for combo in combinations(ROLE_UNIVERSE, size)
    ]


class TestNormalizeText:
    """Tests for normalize_text()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Đào tạo", "dao tao"),
            ("Báo cáo & thống kê", "bao cao & thong ke"),
            ("QUẢN TRỊ", "quan tri"),
            ("Nhật ký hệ thống", "nhat ky he thong"),
            ("Dashboard", "dashboard"),
            ("", ""),
        ],
    )
    def test__accented_text__strips_diacritics_and_case(self, text: str, expected: str) -> None:
        """Strip Vietnamese diacritics and fold case."""
        assert normalize_text(text) == expected

    def test__whitespace__is_preserved(self) -> None:
        """Whitespace is part of the query, not trimmed."""
        assert normalize_text("  Bao ") == "  bao "


class TestFilterByRole:
    """Tests for filter_by_role()."""

    def test__user_role__hides_admin_entries(self, reference_menu: tuple[MenuNode, ...]) -> None:
        """Drop admin divider, admin items and their subtrees."""
        result = filter_by_role(reference_menu, {"user"})

        assert route_ids(result) == ["dashboard", "documents", "audits", "reports"]

    def test__admin_role__keeps_everything(self, reference_menu: tuple[MenuNode, ...]) -> None:
        """Admins see the full reference menu."""
        result = filter_by_role(reference_menu, {"admin"})

        assert result == reference_menu

    def test__empty_roles__keeps_unrestricted_nodes_only(
        self,
        deep_menu: tuple[MenuNode, ...],
    ) -> None:
        """Without roles only nodes lacking requirements survive."""
        result = filter_by_role(deep_menu, set())

        assert route_ids(result) == [
            "home",
            "#Nghiệp vụ",
            "training",
            "training-plans",
            "training-records",
            "training-certificates",
        ]

    def test__nested_requirement__prunes_only_that_subtree(
        self,
        deep_menu: tuple[MenuNode, ...],
    ) -> None:
        """Manager sees personnel but not the admin-only child."""
        result = filter_by_role(deep_menu, {"manager"})

        ids = route_ids(result)
        assert "training-reviews" in ids
        assert "personnel" in ids
        assert "departments" in ids
        assert "positions" not in ids
        assert "#Quản trị" not in ids

    def test__parent_without_visible_children__is_kept(self) -> None:
        """A parent stays even when every child is hidden."""
        tree = (make_item("Parent", "parent", make_item("Secret", "secret", roles=("admin",))),)

        result = filter_by_role(tree, {"user"})

        assert route_ids(result) == ["parent"]
        assert result[0].has_children is False

    def test__input_tree__is_not_modified(self, deep_menu: tuple[MenuNode, ...]) -> None:
        """Filtering returns new nodes and leaves the source intact."""
        before = route_ids(deep_menu)
        roles = {"user"}

        filter_by_role(deep_menu, roles)

        assert route_ids(deep_menu) == before
        assert roles == {"user"}

    def test__role_subsets__are_monotonic(self, deep_menu: tuple[MenuNode, ...]) -> None:
        """Every node visible to a role set is visible to its supersets."""
        for smaller in _all_role_sets():
            for larger in _all_role_sets():
                if not smaller <= larger:
                    continue
                small_ids = set(route_ids(filter_by_role(deep_menu, smaller)))
                large_ids = set(route_ids(filter_by_role(deep_menu, larger)))
                assert small_ids <= large_ids, (smaller, larger)

    def test__filter_twice__is_idempotent(self, deep_menu: tuple[MenuNode, ...]) -> None:
        """Filtering an already filtered tree changes nothing."""
        for roles in _all_role_sets():
            once = filter_by_role(deep_menu, roles)
            assert filter_by_role(once, roles) == once


class TestFilterBySearch:
    """Tests for filter_by_search()."""

    def test__empty_query__returns_input_unchanged(
        self,
        reference_menu: tuple[MenuNode, ...],
    ) -> None:
        """Empty query keeps every node including dividers."""
        assert filter_by_search(reference_menu, "") is reference_menu

    def test__unaccented_query__matches_accented_label(
        self,
        deep_menu: tuple[MenuNode, ...],
    ) -> None:
        """'dao tao' matches 'Đào tạo'."""
        result = filter_by_search(deep_menu, "dao tao")

        assert result[0].label == "Đào tạo"

    def test__report_query__keeps_only_reports(self, reference_menu: tuple[MenuNode, ...]) -> None:
        """Admin searching 'bao cao' sees only the reports item."""
        visible = filter_by_role(reference_menu, {"admin"})

        result = filter_by_search(visible, "bao cao")

        assert route_ids(result) == ["reports"]
        assert result[0].label == "Báo cáo & thống kê"

    def test__child_match__keeps_ancestor_with_matching_children_only(
        self,
        reference_menu: tuple[MenuNode, ...],
    ) -> None:
        """A parent survives through a matching child; other children go."""
        result = filter_by_search(reference_menu, "tai lieu")

        assert route_ids(result) == ["documents", "categories", "settings-group-doc"]

    def test__parent_label_match__filters_children(
        self,
        reference_menu: tuple[MenuNode, ...],
    ) -> None:
        """A parent matching on its own label still gets filtered children."""
        result = filter_by_search(reference_menu, "danh")

        assert route_ids(result) == ["categories", "settings-group-audit"]

    def test__parent_match_without_child_match__has_no_children(self) -> None:
        """Matching parent keeps an empty children tuple."""
        tree = (make_item("Nhân sự", "personnel", make_item("Phòng ban", "departments")),)

        result = filter_by_search(tree, "nhan su")

        assert route_ids(result) == ["personnel"]
        assert result[0].children == ()

    @pytest.mark.parametrize("query", ["a", "QUẢN", "dao", "zzz", " "])
    def test__non_empty_query__drops_all_dividers(
        self,
        deep_menu: tuple[MenuNode, ...],
        query: str,
    ) -> None:
        """No divider survives a non-empty query, even one matching its label."""
        result = filter_by_search(deep_menu, query)

        assert not any(isinstance(node, Divider) for node in result)

    @pytest.mark.parametrize("query", ["a", "dao", "ho so", "CHUNG", "phong"])
    def test__result_items__contain_query_or_matching_descendant(
        self,
        deep_menu: tuple[MenuNode, ...],
        query: str,
    ) -> None:
        """Every kept item matches or has a matching descendant."""
        needle = normalize_text(query)

        def matches(item) -> bool:
            return needle in normalize_text(item.label) or any(
                matches(child) for child in item.children
            )

        for item in iter_items(filter_by_search(deep_menu, query)):
            assert matches(item), item.label

    def test__no_match__returns_empty(self, reference_menu: tuple[MenuNode, ...]) -> None:
        """A query matching nothing yields an empty tree."""
        assert filter_by_search(reference_menu, "khong ton tai") == ()

    def test__order__is_preserved(self, deep_menu: tuple[MenuNode, ...]) -> None:
        """Kept nodes appear in display order."""
        result = filter_by_search(deep_menu, "o")

        ids = route_ids(result)
        full = [i for i in route_ids(deep_menu) if not i.startswith("#")]
        assert ids == [i for i in full if i in ids]
