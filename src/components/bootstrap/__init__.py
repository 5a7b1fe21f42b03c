"""Bootstrap component for Day 0 system initialization.

This component handles the creation of the first super admin account when
the system is first deployed and has no admins.
"""

from .component import run, run_bootstrap
from .models import BootstrapInput, BootstrapOutput, BootstrapValidationError
from .ports import ActivityRepoPort, AdminRepoPort, AuthAdapterPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_bootstrap",
    # Models
    "BootstrapInput",
    "BootstrapOutput",
    "BootstrapValidationError",
    # Ports
    "ActivityRepoPort",
    "AdminRepoPort",
    "AuthAdapterPort",
    "TimePort",
]
