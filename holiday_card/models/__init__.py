"""
Models package for the holiday card backend.

Pydantic models for request/response validation used by the API layer.
"""

from .schemas import (
    DEFAULT_HOLIDAY_TYPE,
    CardRequest,
    ErrorResponse,
    HealthResponse,
    HOLIDAY_TYPES,
)

__all__ = [
    "DEFAULT_HOLIDAY_TYPE",
    "CardRequest",
    "ErrorResponse",
    "HealthResponse",
    "HOLIDAY_TYPES",
]
