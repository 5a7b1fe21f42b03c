"""
Public component - Profile pages, stars, clicks and search for visitors.
"""

from .component import public_view, run_click, run_get_profile, run_search, run_star
from .models import (
    ClickInput,
    ClickOutput,
    ProfileSummary,
    PublicProfileInput,
    PublicProfileOutput,
    PublicValidationError,
    SearchInput,
    SearchOutput,
    StarInput,
    StarOutput,
)
from .ports import (
    CollectionReaderPort,
    ProfileRepoPort,
    StarRepoPort,
    TimePort,
    UserRepoPort,
)

__all__ = [
    # Entry points
    "public_view",
    "run_click",
    "run_get_profile",
    "run_search",
    "run_star",
    # Models
    "ClickInput",
    "ClickOutput",
    "ProfileSummary",
    "PublicProfileInput",
    "PublicProfileOutput",
    "PublicValidationError",
    "SearchInput",
    "SearchOutput",
    "StarInput",
    "StarOutput",
    # Ports
    "CollectionReaderPort",
    "ProfileRepoPort",
    "StarRepoPort",
    "TimePort",
    "UserRepoPort",
]
