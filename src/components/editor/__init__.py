"""Editor component for ordered profile collections.

Keeps a committed and a working copy of each collection, supports drag and
step reordering of the draft, and saves the whole array at once through a
persistence gateway.
"""

from .component import (
    DragReorderController,
    EditingSession,
    OrderedCollectionEditor,
    StepReorderControls,
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
    EditorError,
    EditorResult,
    GatewayResult,
)
from .ports import ClockPort, PersistenceGatewayPort, ProfileSourcePort

__all__ = [
    # Entry points
    "OrderedCollectionEditor",
    "DragReorderController",
    "StepReorderControls",
    "EditingSession",
    # Models
    "CollectionState",
    "DragState",
    "EditorError",
    "EditorResult",
    "GatewayResult",
    # Error codes
    "LIMIT_REACHED",
    "NOT_EDITING",
    "NOT_FOUND",
    "PERSIST_FAILED",
    "SAVE_IN_PROGRESS",
    "VALIDATION_REJECTED",
    # Ports
    "ClockPort",
    "PersistenceGatewayPort",
    "ProfileSourcePort",
]
