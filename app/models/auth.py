"""Authentication models for bearer tokens issued by this service."""

from __future__ import annotations

from pydantic import BaseModel


class UserInfo(BaseModel):
    username: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
