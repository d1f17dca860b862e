from __future__ import annotations

from pydantic import BaseModel, Field

HOLIDAY_TYPES = ("christmas", "newyear", "hanukkah", "generic")
DEFAULT_HOLIDAY_TYPE = "christmas"


class CardRequest(BaseModel):
    """Form fields accepted by the card endpoint (the image travels as a file part)."""
    holiday_type: str = Field(
        default=DEFAULT_HOLIDAY_TYPE,
        description="Greeting and color scheme: 'christmas', 'newyear', 'hanukkah' or 'generic'",
    )


class HealthResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human readable failure reason")
