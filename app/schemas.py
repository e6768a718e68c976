"""Pydantic models for request/response bodies.

Explicit schemas keep validation of the inbound command request out of the
route handler.
"""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional


class CommandRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1, max_length=2000)
    organization_id: str = Field(alias="organizationId", min_length=1, max_length=64)
    user_id: str = Field(alias="userId", min_length=1, max_length=64)
    locale: Optional[str] = Field(default=None, max_length=10)
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey", max_length=200)

    @field_validator("message", "organization_id", "user_id", mode="before")
    @classmethod
    def strip_required(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("idempotency_key", "locale", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class CommandResponseBody(BaseModel):
    action: str
    summary: str
    success: bool
    result: Dict[str, Any] = Field(default_factory=dict)
    message: str


class ErrorResponse(BaseModel):
    error: str
    success: bool = False
    message: Optional[str] = None
