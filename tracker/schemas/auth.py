"""Pydantic schemas for signup, login and the profile view."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SignupSchema(BaseModel):
    username: str
    email: str
    password: str


class LoginSchema(BaseModel):
    # the browser form sends one or the other
    username: str | None = None
    email: str | None = None
    password: str

    @property
    def credential_key(self) -> str:
        return (self.username or self.email or "").strip()


class TokenSchema(BaseModel):
    token: str


class ProfileOutSchema(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    progress: dict[str, dict[str, Any]]

    class Config:
        populate_by_name = True
