"""
Exception hierarchy for urnhop.

All failures that a navigation action can surface derive from UrnhopError,
so callers can catch one type and keep the last good state on screen.
"""

from typing import List, Optional


class UrnhopError(Exception):
    """Base class for all urnhop errors."""


class CatalogApiError(UrnhopError):
    """
    Raised when the catalog API cannot satisfy a request.

    Attributes:
        message: Human-readable summary.
        status: HTTP status of the last failed attempt, if any.
        endpoint: Path of the last failed attempt.
        attempted_endpoints: Every endpoint variant tried, in order.
        details: Response body or transport error of the last attempt.
        direction: Relationship direction, for relationship lookups.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        endpoint: Optional[str] = None,
        attempted_endpoints: Optional[List[str]] = None,
        details: str = "",
        direction: Optional[str] = None,
    ):
        self.message = message
        self.status = status
        self.endpoint = endpoint
        self.attempted_endpoints = list(attempted_endpoints or [])
        self.details = details
        self.direction = direction
        super().__init__(message)

    def describe(self) -> str:
        """Render the message shown to the operator after a failed action."""
        if self.attempted_endpoints:
            attempts = ", ".join(self.attempted_endpoints)
        else:
            attempts = self.endpoint or "unknown endpoint"
        text = f"{self.message} Attempted: {attempts}."
        if self.details:
            text += f" Details: {self.details}"
        return text

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "status": self.status,
            "endpoint": self.endpoint,
            "attempted_endpoints": self.attempted_endpoints,
            "details": self.details,
            "direction": self.direction,
        }


class ResponseShapeError(CatalogApiError):
    """Raised when a 2xx response body matches none of the known shapes."""
