"""Pydantic schemas for the upload signing endpoint."""
from pydantic import BaseModel


class SignResponse(BaseModel):
    """Pre-signed PUT URL and the public URL the object will have."""

    signed_request: str
    url: str


class SignError(BaseModel):
    error: str
    details: str | None = None
