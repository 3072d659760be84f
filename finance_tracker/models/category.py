import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    name: str = Field(max_length=50, index=True)
    icon: str = Field(default="📁", max_length=16)
    # Lowercase-matchable substrings used by the auto-categorizer
    keywords: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Default categories are shared by every user and have no owner
    is_default: bool = Field(default=False, index=True)
    user_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
