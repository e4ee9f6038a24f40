"""Pydantic models for gateway responses."""

from pydantic import BaseModel


class SaveAcknowledgement(BaseModel):
    """Response to a successful collection replace."""

    message: str


class HealthStatus(BaseModel):
    """Liveness probe payload."""

    status: str
    timestamp: str
