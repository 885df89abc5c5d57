"""Pydantic v2 request/response models for the language detection service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


# ── Request Models ──────────────────────────────────────────────────────────

class DetectionRequest(BaseModel):
    """Text submitted for language detection.

    A missing or ``null`` ``text`` reads as the empty string; a non-string
    value fails validation.  Unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    text: StrictStr = Field(default="", description="UTF-8 text to classify")

    @field_validator("text", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return "" if value is None else value


# ── Response Models ─────────────────────────────────────────────────────────

class DetectionResponse(BaseModel):
    """Most probable language of the submitted text."""

    iso_code: str
    language: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    error: str
    code: str
