"""
Profile component - The signed-in user's profile basics, visibility and account.
"""

from .component import (
    load_collections,
    run_get,
    run_update_account,
    run_update_basic,
    run_update_instant_message,
    run_update_visibility,
)
from .models import (
    GetProfileInput,
    ProfileOutput,
    ProfileValidationError,
    UpdateAccountInput,
    UpdateBasicInput,
    UpdateInstantMessageInput,
    UpdateVisibilityInput,
)
from .ports import CollectionReaderPort, ProfileRepoPort, TimePort, UserRepoPort

__all__ = [
    # Entry points
    "load_collections",
    "run_get",
    "run_update_account",
    "run_update_basic",
    "run_update_instant_message",
    "run_update_visibility",
    # Models
    "GetProfileInput",
    "ProfileOutput",
    "ProfileValidationError",
    "UpdateAccountInput",
    "UpdateBasicInput",
    "UpdateInstantMessageInput",
    "UpdateVisibilityInput",
    # Ports
    "CollectionReaderPort",
    "ProfileRepoPort",
    "TimePort",
    "UserRepoPort",
]
