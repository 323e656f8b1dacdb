"""Profile schemas exchanged with the user service."""

from __future__ import annotations

import uuid
from typing import List

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    id: uuid.UUID
    first_name: str = ""
    last_name: str = ""
    email: str = ""


class UsersLookupRequest(BaseModel):
    ids: List[uuid.UUID] = Field(default_factory=list)


class UsersByEmailRequest(BaseModel):
    emails: List[str] = Field(default_factory=list)


class UsersLookupResponse(BaseModel):
    users: List[UserProfile]
