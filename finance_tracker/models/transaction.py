import uuid
import datetime as dt
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Transaction(SQLModel, table=True):
    __tablename__ = "transactions"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    account_id: uuid.UUID = Field(foreign_key="accounts.id", index=True)
    category_id: uuid.UUID = Field(foreign_key="categories.id", index=True)

    # Always positive; the sign lives in `type`
    amount: float = Field(gt=0)
    type: TransactionType = Field(index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    date: dt.date = Field(default_factory=dt.date.today, index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
