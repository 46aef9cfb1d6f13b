"""In-process store for user-defined categories.

Custom categories are kept per principal and per transaction kind. They are not
persisted; the store lives for the lifetime of the application instance.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
import logging
import threading
from typing import Any
import uuid

from flask import current_app

from finance_assistant.constants.categories import get_category_names, get_default_categories, is_default_category

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#007bff"
DEFAULT_ICON = "bi-tag"
CATEGORY_KINDS = ("expense", "income")


class DuplicateCategoryError(ValueError):
    """Raised when a category name already exists for the same kind."""


class CategoryNotFoundError(LookupError):
    """Raised when a category id is unknown for the principal."""


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class CustomCategory:
    """A user-defined category."""

    id: str
    name: str
    kind: str
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime | None = None


class CustomCategoryStore:
    """Thread-safe mapping of principal id to custom categories by kind."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._categories: dict[str, dict[str, list[CustomCategory]]] = {}

    def _bucket(self, user_id: str) -> dict[str, list[CustomCategory]]:
        return self._categories.setdefault(user_id, {kind: [] for kind in CATEGORY_KINDS})

    def list_custom(self, user_id: str) -> dict[str, list[CustomCategory]]:
        """Get a snapshot of a principal's custom categories."""
        with self._lock:
            bucket = self._categories.get(user_id)
            if bucket is None:
                return {kind: [] for kind in CATEGORY_KINDS}
            return {kind: list(categories) for kind, categories in bucket.items()}

    def get_all(self, user_id: str) -> dict[str, Any]:
        """Get default and custom category names plus the custom entries.

        Returns:
            Dictionary with ``expense`` and ``income`` name lists (defaults first)
            and ``custom`` holding the CustomCategory entries by kind
        """
        custom = self.list_custom(user_id)
        defaults = get_default_categories()
        return {
            "expense": defaults["expense"] + [category.name for category in custom["expense"]],
            "income": defaults["income"] + [category.name for category in custom["income"]],
            "custom": custom,
        }

    def create(
        self,
        user_id: str,
        name: str,
        kind: str,
        color: str | None = None,
        icon: str | None = None,
    ) -> CustomCategory:
        """Create a custom category.

        Raises:
            ValueError: If kind is not ``expense`` or ``income``
            DuplicateCategoryError: If the name already exists for that kind, including defaults
        """
        get_category_names(kind)
        name = name.strip()

        with self._lock:
            bucket = self._bucket(user_id)
            if is_default_category(name, kind) or any(
                existing.name.lower() == name.lower() for existing in bucket[kind]
            ):
                raise DuplicateCategoryError("Category already exists")

            category = CustomCategory(
                id=uuid.uuid4().hex,
                name=name,
                kind=kind,
                color=color or DEFAULT_COLOR,
                icon=icon or DEFAULT_ICON,
            )
            bucket[kind].append(category)

        logger.info(f"Created custom {kind} category '{name}' for user {user_id}")
        return category

    def update(
        self,
        user_id: str,
        category_id: str,
        name: str | None = None,
        color: str | None = None,
        icon: str | None = None,
    ) -> CustomCategory:
        """Update the given fields of a custom category.

        Raises:
            CategoryNotFoundError: If the id is unknown for the principal
            DuplicateCategoryError: If the new name collides with another category
        """
        with self._lock:
            kind, index = self._locate(user_id, category_id)
            categories = self._categories[user_id][kind]
            current = categories[index]

            changes: dict[str, Any] = {"updated_at": _now()}
            if name:
                name = name.strip()
                if is_default_category(name, kind) or any(
                    other.id != category_id and other.name.lower() == name.lower() for other in categories
                ):
                    raise DuplicateCategoryError("Category already exists")
                changes["name"] = name
            if color:
                changes["color"] = color
            if icon:
                changes["icon"] = icon

            updated = replace(current, **changes)
            categories[index] = updated

        logger.info(f"Updated custom category {category_id} for user {user_id}")
        return updated

    def delete(self, user_id: str, category_id: str) -> None:
        """Delete a custom category.

        Raises:
            CategoryNotFoundError: If the id is unknown for the principal
        """
        with self._lock:
            kind, index = self._locate(user_id, category_id)
            del self._categories[user_id][kind][index]

        logger.info(f"Deleted custom category {category_id} for user {user_id}")

    def _locate(self, user_id: str, category_id: str) -> tuple[str, int]:
        # Caller must hold the lock
        bucket = self._categories.get(user_id, {})
        for kind, categories in bucket.items():
            for index, category in enumerate(categories):
                if category.id == category_id:
                    return kind, index
        raise CategoryNotFoundError("Category not found")


def get_category_store() -> CustomCategoryStore:
    """Get the store registered on the current application."""
    return current_app.extensions["category_store"]
