"""Per-user custom categories layered over the default taxonomy."""

from .store import (
    CategoryNotFoundError,
    CustomCategory,
    CustomCategoryStore,
    DuplicateCategoryError,
    get_category_store,
)

__all__ = [
    "CategoryNotFoundError",
    "CustomCategory",
    "CustomCategoryStore",
    "DuplicateCategoryError",
    "get_category_store",
]
