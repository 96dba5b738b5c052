"""
Error response schemas.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Returned for rejected requests (400, 404, 405)."""
    error: str


class InternalErrorResponse(BaseModel):
    """Returned when a budget query fails."""
    error: str = "Internal Server Error"
    message: str
