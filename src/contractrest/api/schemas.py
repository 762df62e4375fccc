"""
API schemas — RFC 7807 error envelope and health payloads.

Synthesized operation routes answer with their own ``{"msg": [...]}``
bodies; these models cover everything else the server says.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs» for unhandled failures."""

    type: str = Field(default="about:blank", description="URI reference identifying the problem type")
    title: str = Field(description="Short human-readable summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Explanation specific to this occurrence")
    instance: str = Field(default="", description="URI of the failing request")


class HealthResponse(BaseModel):
    """Liveness / readiness payload."""

    status: Literal["healthy", "starting"]
    service: str
    version: str
    paths: int = Field(default=0, description="Synthesized operation routes")
