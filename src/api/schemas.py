"""API-facing Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TokenRequest(BaseModel):
    identity: str | None = Field(default=None, description="Client identity; the configured default when absent.")


class TokenResponse(BaseModel):
    token: str
    identity: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
