"""Pydantic models for request payloads and response envelopes."""

from pydantic import BaseModel, Field


class MessageIn(BaseModel):
    """Body of a text completion request."""

    message: str = Field(min_length=1, description="User supplied text prompt.")


class CompletionResponse(BaseModel):
    response: str


class CaptionResponse(BaseModel):
    description: str


class ErrorResponse(BaseModel):
    """Error envelope returned by every handler."""

    error: str
