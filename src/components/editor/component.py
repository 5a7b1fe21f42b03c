"""
Editor component - Ordered collection editing with full-replace persistence.

An OrderedCollectionEditor owns one collection's committed (server
acknowledged) and working (draft) arrays. Drag and step controls reorder the
working array; save() sends it wholesale through a PersistenceGateway.

Invariants:
- When not editing, working equals committed by value.
- Reordering only permutes working; ids are never lost or duplicated.
- A failed save keeps the draft and the editing flag.
- Only save() touches the outside world.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from src.adapters.clock import SystemClock
from src.domain.collections import (
    COLLECTION_LIMITS,
    EDITOR_FIELD_LIMITS,
    ITEM_MODELS,
    CollectionType,
)
from src.rules.models import CollectionRules

from ._impl import (
    clip_fields,
    copy_items,
    in_range,
    index_of,
    move_item,
    same_items,
    swap_items,
    temporary_id,
)
from .models import (
    LIMIT_REACHED,
    NOT_EDITING,
    NOT_FOUND,
    PERSIST_FAILED,
    SAVE_IN_PROGRESS,
    VALIDATION_REJECTED,
    CollectionState,
    DragState,
    EditorResult,
)
from .ports import ClockPort, PersistenceGatewayPort, ProfileSourcePort

logger = logging.getLogger(__name__)

_LABELS: dict[CollectionType, str] = {
    "links": "links",
    "experiences": "work experiences",
    "portfolio": "portfolio projects",
    "education": "education entries",
    "achievements": "achievements",
    "extracurriculars": "extracurricular activities",
}


class OrderedCollectionEditor:
    """Draft/commit editor for one ordered collection."""

    def __init__(
        self,
        collection: CollectionType,
        gateway: PersistenceGatewayPort,
        items: Iterable[BaseModel] = (),
        clock: ClockPort | None = None,
        limit: int | None = None,
        field_limits: Mapping[str, int] | None = None,
    ) -> None:
        self.collection = collection
        self.limit = limit if limit is not None else COLLECTION_LIMITS[collection]
        self._model = ITEM_MODELS[collection]
        self._field_limits = dict(
            field_limits if field_limits is not None else EDITOR_FIELD_LIMITS.get(collection, {})
        )
        self._gateway = gateway
        self._clock = clock or SystemClock()

        seeded = [self._coerce(item) for item in items]
        self._committed: list[BaseModel] = copy_items(seeded)
        self._working: list[BaseModel] = copy_items(seeded)
        self._is_editing = False
        self._is_saving = False

    # --- State ---

    @property
    def committed(self) -> tuple[BaseModel, ...]:
        return tuple(self._committed)

    @property
    def working(self) -> tuple[BaseModel, ...]:
        return tuple(self._working)

    @property
    def is_editing(self) -> bool:
        return self._is_editing

    @property
    def is_saving(self) -> bool:
        return self._is_saving

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self._working]  # type: ignore[attr-defined]

    def __len__(self) -> int:
        return len(self._working)

    def snapshot(self) -> CollectionState:
        return CollectionState(
            committed=self.committed,
            working=self.working,
            is_editing=self._is_editing,
            is_saving=self._is_saving,
        )

    # --- Transaction boundary ---

    def start_edit(self) -> EditorResult:
        if self._is_editing:
            return EditorResult.noop()
        self._working = copy_items(self._committed)
        self._is_editing = True
        return EditorResult.ok(changed=False)

    def cancel(self) -> EditorResult:
        if self._is_saving:
            return EditorResult.failed(
                SAVE_IN_PROGRESS, "Wait for the current save to finish before cancelling"
            )
        self._working = copy_items(self._committed)
        self._is_editing = False
        return EditorResult.ok()

    def save(self) -> EditorResult:
        """
        Persist the working array through the gateway.

        On success the saved array becomes the committed baseline. On failure
        the draft stays as it is so the user can fix it and retry.
        """
        if self._is_saving:
            return EditorResult.failed(SAVE_IN_PROGRESS, "A save is already in progress")
        if not self._is_editing:
            return EditorResult.failed(NOT_EDITING, "Nothing to save")

        sent = copy_items(self._working)
        self._is_saving = True
        try:
            result = self._gateway.replace_all(copy_items(sent))
        finally:
            self._is_saving = False

        if not result.success:
            code = VALIDATION_REJECTED if result.rejected else PERSIST_FAILED
            message = result.message or f"Failed to save {_LABELS[self.collection]}"
            logger.warning("Saving %s failed (%s): %s", self.collection, code, message)
            return EditorResult.failed(code, message)

        saved = [self._coerce(item) for item in result.items] if result.items is not None else sent
        edited_meanwhile = not same_items(self._working, sent)
        self._committed = copy_items(saved)
        if edited_meanwhile:
            # Edits made while the request was in flight stay in the draft.
            logger.info("Kept %s draft edits made during save", self.collection)
            return EditorResult.ok()

        self._working = copy_items(saved)
        self._is_editing = False
        logger.info("Saved %d %s", len(saved), self.collection)
        return EditorResult.ok()

    # --- Mutations ---

    def add(self, item: BaseModel | dict[str, Any]) -> EditorResult:
        if not self._is_editing:
            return self._not_editing()
        if len(self._working) >= self.limit:
            return EditorResult.failed(
                LIMIT_REACHED,
                f"You can add up to {self.limit} {_LABELS[self.collection]}",
            )

        values = item.model_dump() if isinstance(item, BaseModel) else dict(item)
        values = clip_fields(values, self._field_limits)
        if not values.get("id"):
            existing = {str(i.id) for i in self._working}  # type: ignore[attr-defined]
            values["id"] = temporary_id(existing, self._clock.epoch_millis())

        self._working.append(self._model.model_validate(values))
        return EditorResult.ok()

    def update(self, item_id: str, **fields: Any) -> EditorResult:
        if not self._is_editing:
            return self._not_editing()
        index = index_of(self._working, item_id)
        if index is None:
            return self._missing("update", item_id)

        fields.pop("id", None)
        merged = {**self._working[index].model_dump(), **fields}
        self._working[index] = self._model.model_validate(clip_fields(merged, self._field_limits))
        return EditorResult.ok()

    def remove(self, item_id: str) -> EditorResult:
        if not self._is_editing:
            return self._not_editing()
        index = index_of(self._working, item_id)
        if index is None:
            return self._missing("remove", item_id)

        del self._working[index]
        return EditorResult.ok()

    def reorder(self, from_index: int, to_index: int) -> EditorResult:
        if not self._is_editing:
            return self._not_editing()
        if from_index == to_index:
            return EditorResult.noop()
        if not in_range(self._working, from_index) or not in_range(self._working, to_index):
            return EditorResult.noop()

        self._working = move_item(self._working, from_index, to_index)
        return EditorResult.ok()

    def swap(self, i: int, j: int) -> EditorResult:
        if not self._is_editing:
            return self._not_editing()
        if i == j or not in_range(self._working, i) or not in_range(self._working, j):
            return EditorResult.noop()

        self._working = swap_items(self._working, i, j)
        return EditorResult.ok()

    # --- Helpers ---

    def _coerce(self, item: BaseModel | dict[str, Any]) -> BaseModel:
        if isinstance(item, self._model):
            return item
        values = item.model_dump() if isinstance(item, BaseModel) else item
        return self._model.model_validate(values)

    def _not_editing(self) -> EditorResult:
        return EditorResult.failed(NOT_EDITING, "Start editing before making changes")

    def _missing(self, operation: str, item_id: str) -> EditorResult:
        logger.warning(
            "%s: cannot %s item %r, it is not in the working list",
            self.collection,
            operation,
            item_id,
        )
        return EditorResult.failed(NOT_FOUND, f"Item {item_id} not found")


class DragReorderController:
    """
    Turns drag events into live reorders.

    Every drag-over on a new index moves the dragged item there immediately,
    so the working array is always the order the user sees.
    """

    def __init__(self, editor: OrderedCollectionEditor) -> None:
        self._editor = editor
        self._dragged_index: int | None = None
        self._drag_over_index: int | None = None

    def _drop_stale(self) -> None:
        # A cancel, save or remove can leave the dragged index behind
        if self._dragged_index is None:
            return
        if not self._editor.is_editing or not in_range(self._editor.working, self._dragged_index):
            self.on_drag_end()

    @property
    def state(self) -> DragState:
        self._drop_stale()
        return DragState(
            dragged_index=self._dragged_index,
            drag_over_index=self._drag_over_index,
        )

    @property
    def is_dragging(self) -> bool:
        self._drop_stale()
        return self._dragged_index is not None

    def on_drag_start(self, index: int) -> None:
        if not self._editor.is_editing or not in_range(self._editor.working, index):
            return
        self._dragged_index = index
        self._drag_over_index = index

    def on_drag_over(self, index: int) -> None:
        self._drop_stale()
        if self._dragged_index is None or index == self._dragged_index:
            return
        if not in_range(self._editor.working, index):
            return

        result = self._editor.reorder(self._dragged_index, index)
        if result.changed:
            self._dragged_index = index
            self._drag_over_index = index

    def on_drag_end(self) -> None:
        self._dragged_index = None
        self._drag_over_index = None


class StepReorderControls:
    """Move-up / move-down buttons; independent of any drag in progress."""

    def __init__(self, editor: OrderedCollectionEditor) -> None:
        self._editor = editor

    def move_up(self, index: int) -> EditorResult:
        if index <= 0:
            return EditorResult.noop()
        return self._editor.swap(index, index - 1)

    def move_down(self, index: int) -> EditorResult:
        if index >= len(self._editor) - 1:
            return EditorResult.noop()
        return self._editor.swap(index, index + 1)


class EditingSession:
    """
    Editors for every collection of one profile, scoped to an editing session.

    Created when the profile editor opens, seeded from the server, and closed
    when it goes away. Drafts never outlive the session.
    """

    def __init__(
        self,
        source: ProfileSourcePort,
        collections: Sequence[CollectionType] | None = None,
        clock: ClockPort | None = None,
        rules: CollectionRules | None = None,
    ) -> None:
        self._source = source
        self._clock = clock
        self._rules = rules
        self._collections = tuple(collections) if collections else tuple(ITEM_MODELS)
        self._editors: dict[CollectionType, OrderedCollectionEditor] = {}
        self._open = False

    def _limits(self, collection: CollectionType) -> dict[str, Any]:
        # Without rules the editors fall back to the built-in limits
        if self._rules is None:
            return {}
        configured = self._rules.fields.get(collection, {})
        return {
            "limit": self._rules.limit_for(collection),
            "field_limits": {
                name: configured[name].max if name in configured else default
                for name, default in EDITOR_FIELD_LIMITS.get(collection, {}).items()
            },
        }

    def open(self) -> EditingSession:
        fetched = self._source.fetch_collections()
        self._editors = {
            collection: OrderedCollectionEditor(
                collection,
                gateway=self._source.gateway(collection),
                items=fetched.get(collection, []),
                clock=self._clock,
                **self._limits(collection),
            )
            for collection in self._collections
        }
        self._open = True
        return self

    def close(self) -> None:
        self._editors = {}
        self._open = False

    def __enter__(self) -> EditingSession:
        return self.open()

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._open

    def editor(self, collection: CollectionType) -> OrderedCollectionEditor:
        if not self._open:
            raise RuntimeError("Editing session is not open")
        return self._editors[collection]

    def drag_controller(self, collection: CollectionType) -> DragReorderController:
        return DragReorderController(self.editor(collection))

    def step_controls(self, collection: CollectionType) -> StepReorderControls:
        return StepReorderControls(self.editor(collection))

    def dirty_collections(self) -> list[CollectionType]:
        """Collections whose draft differs from the committed array."""
        return [
            collection
            for collection, editor in self._editors.items()
            if editor.is_editing and not same_items(editor.working, editor.committed)
        ]
