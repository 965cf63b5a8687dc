"""
API v1 Helper Functions

Shared helper functions extracted from endpoint modules for better
code organization and reusability.
"""

from app.api.v1.helpers.responses import (
    RESP_AUTH,
    RESP_AUTH_400,
    RESP_AUTH_400_404,
    RESP_AUTH_404,
)
from app.api.v1.helpers.teams import check_team_access

__all__ = [
    "RESP_AUTH",
    "RESP_AUTH_400",
    "RESP_AUTH_400_404",
    "RESP_AUTH_404",
    "check_team_access",
]
