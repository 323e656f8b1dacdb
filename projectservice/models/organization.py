"""Organization model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Organization(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    name: str = Field(max_length=256, unique=True, nullable=False, index=True)
    description: str = Field(default="", nullable=False)
    legal_info: Optional[str] = Field(default=None, max_length=512)
    created_by_user_id: uuid.UUID = Field(nullable=False)
    approved: bool = Field(default=False, nullable=False)
    active: bool = Field(default=True, nullable=False)
