"""Exception types shared by the store, the resolver and the HTTP layer."""
from typing import Any, Mapping, Optional


class PlanifiaError(Exception):
    """Base error carrying a message, optional details and a suggested HTTP status."""

    http_status = 500

    def __init__(self, message: str = "Internal error", details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class RecordStoreError(PlanifiaError):
    """Raised when a collection file cannot be read or written."""

    http_status = 503


class IngredientResolverError(PlanifiaError):
    """Raised when no ingredient list could be produced for a dish."""

    http_status = 502


class NotSignedInError(PlanifiaError):
    """Raised when an operation needs a session and none is active."""

    http_status = 401

    def __init__(self, message: str = "Not signed in", details: Optional[Mapping[str, Any]] = None):
        super().__init__(message, details)
