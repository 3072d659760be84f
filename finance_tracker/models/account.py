import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlmodel import SQLModel, Field


class AccountType(str, Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    CREDIT = "CREDIT"
    CASH = "CASH"


class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    name: str = Field(max_length=100)
    type: AccountType = Field(default=AccountType.CHECKING)
    # One of config.SUPPORTED_CURRENCIES; every aggregate is partitioned by it
    currency: str = Field(default="RON", max_length=3)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
