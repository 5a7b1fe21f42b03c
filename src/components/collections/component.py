"""
Collections component - Server side of full-replace persistence.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

import logging

from src.rules.models import CollectionRules

from ._impl import assign_ids, parse_and_validate
from .models import CollectionOutput, ListCollectionInput, ReplaceCollectionInput
from .ports import CollectionRepoPort

logger = logging.getLogger(__name__)


def run_replace(
    inp: ReplaceCollectionInput,
    repo: CollectionRepoPort,
    rules: CollectionRules,
) -> CollectionOutput:
    """Validate and store the complete new array for one collection."""
    items, errors = parse_and_validate(inp.collection, list(inp.items), rules)
    if errors:
        logger.info(
            "Rejected %s replace for user %s: %s",
            inp.collection,
            inp.user_id,
            errors[0].code,
        )
        return CollectionOutput.failed(inp.collection, errors)

    owned = repo.list_ids(inp.user_id, inp.collection)
    items = assign_ids(inp.collection, items, owned)
    saved = repo.replace_all(inp.user_id, inp.collection, items)

    logger.info("Replaced %s for user %s (%d items)", inp.collection, inp.user_id, len(saved))
    return CollectionOutput.ok(inp.collection, saved)


def run_list(inp: ListCollectionInput, repo: CollectionRepoPort) -> CollectionOutput:
    """Items of one collection in display order."""
    return CollectionOutput.ok(inp.collection, repo.list(inp.user_id, inp.collection))


def run(
    inp: ReplaceCollectionInput | ListCollectionInput,
    *,
    repo: CollectionRepoPort,
    rules: CollectionRules | None = None,
) -> CollectionOutput:
    if isinstance(inp, ReplaceCollectionInput):
        assert rules
        return run_replace(inp, repo, rules)

    elif isinstance(inp, ListCollectionInput):
        return run_list(inp, repo)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
