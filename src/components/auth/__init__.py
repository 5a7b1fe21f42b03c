"""
Auth component - Authentication for profile owners.

Handles registration, credential login, Google sign-in and username checks.
"""

from ._impl import (
    generate_unique_username,
    normalize_email,
    validate_email,
    validate_password,
    validate_username,
)
from .component import (
    run,
    run_check_username,
    run_google_login,
    run_login,
    run_register,
)
from .models import (
    AuthOutput,
    AuthValidationError,
    CheckUsernameInput,
    GoogleIdentity,
    GoogleLoginInput,
    LoginInput,
    RegisterInput,
    UsernameCheckOutput,
)
from .ports import (
    AuthAdapterPort,
    GoogleVerifierPort,
    ProfileRepoPort,
    TimePort,
    UserRepoPort,
)

__all__ = [
    # Entry points
    "run",
    "run_check_username",
    "run_google_login",
    "run_login",
    "run_register",
    # Validation
    "generate_unique_username",
    "normalize_email",
    "validate_email",
    "validate_password",
    "validate_username",
    # Models
    "AuthOutput",
    "AuthValidationError",
    "CheckUsernameInput",
    "GoogleIdentity",
    "GoogleLoginInput",
    "LoginInput",
    "RegisterInput",
    "UsernameCheckOutput",
    # Ports
    "AuthAdapterPort",
    "GoogleVerifierPort",
    "ProfileRepoPort",
    "TimePort",
    "UserRepoPort",
]
