"""
Editor component - Data models.

Results, error codes and state snapshots for ordered collection editing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pydantic import BaseModel

# --- Error Codes ---

LIMIT_REACHED = "LIMIT_REACHED"
VALIDATION_REJECTED = "VALIDATION_REJECTED"
PERSIST_FAILED = "PERSIST_FAILED"
NOT_FOUND = "NOT_FOUND"
NOT_EDITING = "NOT_EDITING"
SAVE_IN_PROGRESS = "SAVE_IN_PROGRESS"


@dataclass(frozen=True)
class EditorError:
    """A user-facing editor failure."""

    code: str
    message: str


@dataclass(frozen=True)
class EditorResult:
    """Outcome of an editor operation."""

    success: bool
    changed: bool = False
    errors: tuple[EditorError, ...] = ()

    @property
    def error(self) -> EditorError | None:
        return self.errors[0] if self.errors else None

    @classmethod
    def ok(cls, changed: bool = True) -> EditorResult:
        return cls(success=True, changed=changed)

    @classmethod
    def noop(cls) -> EditorResult:
        return cls(success=True, changed=False)

    @classmethod
    def failed(cls, code: str, message: str) -> EditorResult:
        return cls(success=False, errors=(EditorError(code=code, message=message),))


@dataclass(frozen=True)
class GatewayResult:
    """
    Outcome of a full-replace persistence call.

    `rejected` separates validation failures the user can fix from transport
    or server failures. `items` is the server's copy of the saved array when
    the server echoes it back.
    """

    success: bool
    message: str | None = None
    rejected: bool = False
    items: list[BaseModel] | None = None

    @classmethod
    def ok(cls, items: list[BaseModel] | None = None, message: str | None = None) -> GatewayResult:
        return cls(success=True, message=message, items=items)

    @classmethod
    def failure(cls, message: str, rejected: bool = False) -> GatewayResult:
        return cls(success=False, message=message, rejected=rejected)


@dataclass(frozen=True)
class DragState:
    """Transient drag state; both indices are None when idle."""

    dragged_index: int | None = None
    drag_over_index: int | None = None

    @property
    def is_idle(self) -> bool:
        return self.dragged_index is None


@dataclass(frozen=True)
class CollectionState:
    """Snapshot of an editor's committed and working arrays."""

    committed: tuple[BaseModel, ...]
    working: tuple[BaseModel, ...]
    is_editing: bool
    is_saving: bool = False
