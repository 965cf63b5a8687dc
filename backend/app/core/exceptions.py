"""
Domain Exceptions

Errors raised by the service layer. Each carries the HTTP status it maps to,
so endpoints can let them propagate and a single handler renders them.
"""

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class TeamUpError(Exception):
    """Base exception for all TeamUp workflow errors."""

    status_code: int = 400
    code: str = "TEAMUP_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            result["details"] = self.details
        return result


class NotFoundError(TeamUpError):
    status_code = 404
    code = "NOT_FOUND"


class PermissionDeniedError(TeamUpError):
    status_code = 403
    code = "PERMISSION_DENIED"


class ConflictError(TeamUpError):
    """State conflicts: already in a team, team full, duplicate invitation."""

    status_code = 409
    code = "CONFLICT"


class ValidationFailedError(TeamUpError):
    status_code = 400
    code = "VALIDATION_FAILED"


class ExternalServiceError(TeamUpError):
    """An upstream API (GitHub, Gemini) failed or returned garbage."""

    status_code = 502
    code = "EXTERNAL_SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        service: str,
        upstream_status: Optional[int] = None,
    ):
        details: Dict[str, Any] = {"service": service}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(message, details)
        self.service = service
        self.upstream_status = upstream_status


async def teamup_exception_handler(request: Request, exc: TeamUpError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
