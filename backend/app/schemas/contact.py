"""
Contact form schemas.
"""
from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator


class ContactRequest(BaseModel):
    """Contact form submission. Every field is required and non-blank."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., max_length=200)
    email: EmailStr
    subject: str = Field(..., max_length=300)
    message: str = Field(..., max_length=10000)

    @field_validator('name', 'subject', 'message')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("All fields are required")
        return v
