# bontemp/core/errors.py
"""
Typed errors returned to clients of callable endpoints.

Each error carries a machine-readable ``status`` (the Firebase callable status
name) and the HTTP code the route answers with. The message is shown to the
user as-is, so it must never contain internal diagnostics.
"""

from typing import Any, Dict


class CallableError(Exception):
    """Base class for errors that are surfaced to the caller unchanged."""
    status = 'INTERNAL'
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"status": self.status, "message": self.message}}


class Unauthenticated(CallableError):
    status = 'UNAUTHENTICATED'
    http_status = 401


class PermissionDenied(CallableError):
    status = 'PERMISSION_DENIED'
    http_status = 403


class InvalidArgument(CallableError):
    status = 'INVALID_ARGUMENT'
    http_status = 400


class Internal(CallableError):
    status = 'INTERNAL'
    http_status = 500
