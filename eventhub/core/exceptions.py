"""
Domain error taxonomy.

Services raise these; the API layer maps them to HTTP responses with a
machine-readable `error` code and a human-readable `detail`.
"""

from typing import Optional


class EventHubError(Exception):
    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class ValidationError(EventHubError):
    status_code = 400
    code = "validation_error"


class Unauthenticated(EventHubError):
    status_code = 401
    code = "unauthenticated"


class Forbidden(EventHubError):
    status_code = 403
    code = "forbidden"


class NotFound(EventHubError):
    status_code = 404
    code = "not_found"


class Conflict(EventHubError):
    status_code = 409
    code = "conflict"


class InsufficientInventory(Conflict):
    code = "insufficient_inventory"

    def __init__(self, remaining: int):
        self.remaining = remaining
        super().__init__(f"Not enough tickets available. Only {remaining} tickets left.")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "remaining": self.remaining}


class StoreError(EventHubError):
    """The record store could not complete an operation."""

    status_code = 500
    code = "store_error"
