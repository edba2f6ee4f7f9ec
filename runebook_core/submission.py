"""Validation of user-entered items before they reach the store."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .schemas import Category, NewItem


def build_custom_item(
    category: str,
    name: str,
    description: str,
    tags: Sequence[str] | None = None,
    extra: Any = None,
) -> NewItem:
    """Build a custom item from raw form input.

    Without explicit tags the item is tagged with its own name and category.

    Raises:
        ValidationError: If name or description is blank, or the category is unknown
    """
    name = (name or "").strip()
    description = (description or "").strip()
    if not name or not description:
        raise ValidationError("Both name and description are required.")
    try:
        category_value = Category(category)
    except ValueError as exc:
        choices = ", ".join(c.value for c in Category)
        raise ValidationError(f"Unknown category {category!r}; expected one of: {choices}") from exc
    item_tags = list(tags) if tags else [name, category_value.value]
    try:
        return NewItem(
            category=category_value,
            name=name,
            description=description,
            tags=item_tags,
            extra=extra,
        )
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc
