"""
Collections component - Ordered profile collections.

Validates and stores each collection as one complete array.
"""

from ._impl import assign_ids, parse_and_validate
from .component import run, run_list, run_replace
from .models import (
    CollectionOutput,
    CollectionValidationError,
    ListCollectionInput,
    ReplaceCollectionInput,
)
from .ports import CollectionRepoPort

__all__ = [
    # Entry points
    "run",
    "run_list",
    "run_replace",
    # Functional core
    "assign_ids",
    "parse_and_validate",
    # Models
    "CollectionOutput",
    "CollectionValidationError",
    "ListCollectionInput",
    "ReplaceCollectionInput",
    # Ports
    "CollectionRepoPort",
]
