"""
Collection validation and id assignment - Functional Core.

Pure business logic, no I/O.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from src.domain.collections import ITEM_MODELS, CollectionType
from src.rules.models import CollectionRules

from .models import CollectionValidationError

URL_FIELDS = ("url", "image_url", "website_url")

# Nested ordered children stored inside their parent item.
NESTED_LISTS: dict[CollectionType, str] = {
    "experiences": "projects",
    "portfolio": "images",
}


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def validate_url(
    value: str, field: str, index: int, allowed_schemes: list[str]
) -> CollectionValidationError | None:
    if not value:
        return None
    scheme = urlparse(value.strip()).scheme.lower()
    if scheme not in allowed_schemes:
        schemes = " or ".join(f"{s}://" for s in allowed_schemes)
        return CollectionValidationError(
            code=f"{field}_invalid_scheme",
            message=f"{_label(field)} must start with {schemes}",
            field=field,
            index=index,
        )
    return None


def validate_fields(
    collection: CollectionType,
    index: int,
    values: dict[str, Any],
    rules: CollectionRules,
) -> list[CollectionValidationError]:
    """Check required fields, lengths and URL schemes of one item."""
    errors: list[CollectionValidationError] = []

    for field, limit in rules.fields.get(collection, {}).items():
        value = values.get(field)
        text = value.strip() if isinstance(value, str) else ""

        if limit.required and not text:
            errors.append(
                CollectionValidationError(
                    code=f"{field}_required",
                    message=f"{_label(field)} is required",
                    field=field,
                    index=index,
                )
            )
        elif isinstance(value, str) and len(value) > limit.max:
            errors.append(
                CollectionValidationError(
                    code=f"{field}_too_long",
                    message=f"{_label(field)} must be {limit.max} characters or less",
                    field=field,
                    index=index,
                )
            )

    for field in URL_FIELDS:
        value = values.get(field)
        if isinstance(value, str):
            error = validate_url(value, field, index, rules.allowed_url_schemes)
            if error:
                errors.append(error)

    for child in values.get("images") or []:
        if isinstance(child, dict) and isinstance(child.get("url"), str):
            error = validate_url(child["url"], "image_url", index, rules.allowed_url_schemes)
            if error:
                errors.append(error)

    return errors


def parse_and_validate(
    collection: CollectionType,
    raw_items: list[Any],
    rules: CollectionRules,
) -> tuple[list[BaseModel], list[CollectionValidationError]]:
    """
    Validate a complete collection array.

    Returns:
        Tuple of (items, errors). Items is empty when any error is found,
        since a replace is all or nothing.
    """
    limit = rules.limit_for(collection)
    if len(raw_items) > limit:
        return [], [
            CollectionValidationError(
                code="limit_exceeded",
                message=f"Maximum {limit} {collection} allowed",
            )
        ]

    model = ITEM_MODELS[collection]
    items: list[BaseModel] = []
    errors: list[CollectionValidationError] = []

    for i, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            errors.append(
                CollectionValidationError(
                    code="invalid_item",
                    message=f"Item {i + 1} must be an object",
                    index=i,
                )
            )
            continue

        field_errors = validate_fields(collection, i, raw, rules)
        if field_errors:
            errors.extend(field_errors)
            continue

        try:
            items.append(model.model_validate(raw))
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            errors.append(
                CollectionValidationError(
                    code="invalid_item",
                    message=f"Item {i + 1}: {field} {first['msg']}",
                    field=field,
                    index=i,
                )
            )

    if errors:
        return [], errors
    return items, []


def assign_ids(
    collection: CollectionType,
    items: list[BaseModel],
    owned_ids: set[str],
) -> list[BaseModel]:
    """
    Keep ids the user already owns; give everything else a fresh UUID.

    Temporary client ids and ids belonging to other users never reach
    storage. Duplicate ids within one array are also replaced.
    """
    seen: set[str] = set()
    result: list[BaseModel] = []

    for item in items:
        item_id = getattr(item, "id", "")
        if not item_id or item_id not in owned_ids or item_id in seen:
            item_id = str(uuid4())
        seen.add(item_id)

        updates: dict[str, Any] = {"id": item_id}
        nested = NESTED_LISTS.get(collection)
        if nested:
            updates[nested] = [
                child if child.id else child.model_copy(update={"id": str(uuid4())})
                for child in getattr(item, nested)
            ]
        result.append(item.model_copy(update=updates))

    return result
