from typing import Iterable, Optional

from models.category import Category
from utils.constants import (
    DEFAULT_CATEGORIES,
    FALLBACK_CATEGORY_IDS,
    UNKNOWN_CATEGORY_ICON,
    UNKNOWN_CATEGORY_NAME,
)


class CategoryService:
    """Read-only lookup over the fixed category set.

    Two indexes: by id, and by (display name, type). Names repeat across
    types ('其他' is both an income and an expense category), so a name alone
    never identifies a category.
    """

    def __init__(self, categories: Iterable[Category] | None = None):
        if categories is None:
            categories = [Category(**c) for c in DEFAULT_CATEGORIES]
        self._categories = list(categories)
        self._by_id = {c.id: c for c in self._categories}
        self._by_name_type = {(c.name, c.type): c for c in self._categories}

    def get_all(self) -> list[Category]:
        return list(self._categories)

    def get_by_type(self, type_: str) -> list[Category]:
        return [c for c in self._categories if c.type == type_]

    def get_by_id(self, category_id: str) -> Optional[Category]:
        return self._by_id.get(category_id)

    def find_by_name(self, name: str, type_: str) -> Optional[Category]:
        """Unresolved lookups return None; see resolve_id for the fallback."""
        return self._by_name_type.get((name.strip(), type_))

    def fallback_id(self, type_: str) -> str:
        return FALLBACK_CATEGORY_IDS.get(type_, FALLBACK_CATEGORY_IDS["expense"])

    def resolve_id(self, name: str, type_: str) -> str:
        """Category id for a display name, or the type's 'other' category."""
        category = self.find_by_name(name, type_)
        return category.id if category else self.fallback_id(type_)

    def name_for(self, category_id: str) -> str:
        category = self._by_id.get(category_id)
        return category.name if category else UNKNOWN_CATEGORY_NAME

    def icon_for(self, category_id: str) -> str:
        category = self._by_id.get(category_id)
        return category.icon if category else UNKNOWN_CATEGORY_ICON
