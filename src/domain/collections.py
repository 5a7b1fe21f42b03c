"""
Collection types - the independently edited, ordered profile sections.

Each collection type maps to an item model, a wire field name and a maximum
size. Array index is the only ordering.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from src.domain.entities import (
    Achievement,
    Education,
    Extracurricular,
    LinkItem,
    PortfolioProject,
    WorkExperience,
)

CollectionType = Literal[
    "links",
    "experiences",
    "portfolio",
    "education",
    "achievements",
    "extracurriculars",
]

COLLECTION_TYPES: tuple[CollectionType, ...] = (
    "links",
    "experiences",
    "portfolio",
    "education",
    "achievements",
    "extracurriculars",
)

ITEM_MODELS: dict[CollectionType, type[BaseModel]] = {
    "links": LinkItem,
    "experiences": WorkExperience,
    "portfolio": PortfolioProject,
    "education": Education,
    "achievements": Achievement,
    "extracurriculars": Extracurricular,
}

COLLECTION_LIMITS: dict[CollectionType, int] = {
    "links": 25,
    "experiences": 10,
    "portfolio": 10,
    "education": 10,
    "achievements": 8,
    "extracurriculars": 8,
}

# Field length limits enforced while typing in the editor.
EDITOR_FIELD_LIMITS: dict[CollectionType, dict[str, int]] = {
    "links": {"title": 50, "description": 65},
}

# Visibility flag that hides a collection on the public profile.
VISIBILITY_FLAGS: dict[CollectionType, str] = {
    "links": "show_links",
    "experiences": "show_experience",
    "portfolio": "show_portfolio",
    "education": "show_education",
    "achievements": "show_achievements",
    "extracurriculars": "show_extracurriculars",
}


def is_collection_type(value: str) -> bool:
    return value in COLLECTION_TYPES


def parse_items(collection: CollectionType, raw_items: list[dict]) -> list[BaseModel]:
    """Validate raw dicts into the collection's item model."""
    model = ITEM_MODELS[collection]
    return [model.model_validate(raw) for raw in raw_items]
