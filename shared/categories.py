"""Static category catalog and display lookups.

Transactions and budgets reference categories by name only. Names missing from
the catalog are tolerated everywhere and resolve to the default display values.
"""

from __future__ import annotations

from shared.models import Category


DEFAULT_CATEGORY_COLOR = "#85C1E9"
DEFAULT_CATEGORY_ICON = "more-horizontal"
INCOME_CATEGORY_NAME = "Income"

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="1", name="Food & Dining", color="#FF6B6B", icon="utensils"),
    Category(id="2", name="Transportation", color="#4ECDC4", icon="car"),
    Category(id="3", name="Shopping", color="#45B7D1", icon="shopping-bag"),
    Category(id="4", name="Entertainment", color="#96CEB4", icon="film"),
    Category(id="5", name="Bills & Utilities", color="#FFEAA7", icon="zap"),
    Category(id="6", name="Healthcare", color="#DDA0DD", icon="heart"),
    Category(id="7", name="Education", color="#98D8C8", icon="book"),
    Category(id="8", name="Travel", color="#F7DC6F", icon="plane"),
    Category(id="9", name=INCOME_CATEGORY_NAME, color="#58D68D", icon="trending-up"),
    Category(id="10", name="Other", color=DEFAULT_CATEGORY_COLOR, icon=DEFAULT_CATEGORY_ICON),
)

_CATEGORIES_BY_NAME: dict[str, Category] = {category.name: category for category in DEFAULT_CATEGORIES}


def get_category(name: str) -> Category | None:
    """Return the catalog entry for an exact category name."""
    return _CATEGORIES_BY_NAME.get(name)


def get_category_color(name: str) -> str:
    category = get_category(name)
    return category.color if category is not None else DEFAULT_CATEGORY_COLOR


def get_category_icon(name: str) -> str:
    category = get_category(name)
    return category.icon if category is not None else DEFAULT_CATEGORY_ICON


def list_categories(*, budgetable_only: bool = False) -> list[Category]:
    """Return the catalog in display order; budgets never target income."""
    if budgetable_only:
        return [category for category in DEFAULT_CATEGORIES if category.name != INCOME_CATEGORY_NAME]
    return list(DEFAULT_CATEGORIES)
