"""Immutable records exchanged between the transaction feed and the analytics core."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Tuple

INCOME = "INCOME"
EXPENSE = "EXPENSE"


@dataclass(frozen=True)
class TransactionRecord:
    """One transaction as seen by the analytics core.

    ``amount`` is always positive; ``type`` carries the direction. The
    category name and icon are denormalized so breakdowns need no lookups.
    """

    id: Any
    amount: float
    type: str
    date: date
    category_id: Any
    account_id: Any
    description: Optional[str] = None
    category_name: str = ""
    category_icon: str = ""

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE

    @property
    def is_income(self) -> bool:
        return self.type == INCOME


@dataclass(frozen=True)
class CategoryKeywords:
    id: Any
    name: str
    keywords: Tuple[str, ...] = field(default_factory=tuple)
    is_default: bool = False


@dataclass(frozen=True)
class BudgetLimit:
    budget_id: Any
    category_id: Any
    monthly_limit: float
    month: int
    year: int
    category_name: str = ""
    category_icon: str = ""
