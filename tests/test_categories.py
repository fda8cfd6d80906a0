"""Tests for the category catalog lookups."""

from shared.categories import (
    DEFAULT_CATEGORIES,
    get_category,
    get_category_color,
    get_category_icon,
    list_categories,
)


def test_catalog_has_ten_unique_categories() -> None:
    names = [category.name for category in DEFAULT_CATEGORIES]

    assert len(names) == 10
    assert len(set(names)) == 10


def test_lookups_return_catalog_values() -> None:
    assert get_category_color("Food & Dining") == "#FF6B6B"
    assert get_category_icon("Travel") == "plane"
    assert get_category("Income").icon == "trending-up"


def test_lookups_fall_back_for_unknown_names() -> None:
    assert get_category("Groceries") is None
    assert get_category_color("Groceries") == "#85C1E9"
    assert get_category_icon("Groceries") == "more-horizontal"
    assert get_category_icon("food & dining") == "more-horizontal"


def test_list_categories_budgetable_only_drops_income() -> None:
    assert len(list_categories()) == 10
    assert [category.name for category in list_categories(budgetable_only=True)][-1] == "Other"
    assert "Income" not in {category.name for category in list_categories(budgetable_only=True)}
