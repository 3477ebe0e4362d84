"""Pydantic models for the API layer.

Request fields are optional at the schema level so that a missing or empty
value reaches the route and is reported as a 400 InvalidInput, not a 422.
"""

from typing import Literal

from pydantic import BaseModel, field_validator

BUNDLE_KEYS = ("html", "css", "js")


class GenerateRequest(BaseModel):
    """Incoming website generation request."""
    prompt: str | None = None


class ChatRequest(BaseModel):
    """Incoming assistant chat message."""
    message: str | None = None


class SiteBundle(BaseModel):
    """Normalized generation output. All three fragments are always present."""
    html: str = ""
    css: str = ""
    js: str = ""

    @field_validator("html", "css", "js", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return "" if value is None else value


class ChatResponse(BaseModel):
    reply: str


class HealthResponse(BaseModel):
    status: Literal["ok", "error"]
    message: str
