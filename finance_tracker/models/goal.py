import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


class SavingsGoal(SQLModel, table=True):
    __tablename__ = "savings_goals"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    name: str = Field(max_length=100)
    target_amount: float = Field(gt=0)
    # Changed through deposit/withdraw; never below 0, may exceed the target
    current_amount: float = Field(default=0, ge=0)
    currency: str = Field(default="RON", max_length=3)
    deadline: Optional[date] = Field(default=None)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
