import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, SQLModel

from ..analytics.aggregation import category_breakdown, monthly_rollup
from ..analytics.periods import month_bounds, window_start
from ..core.security import get_current_user
from ..database import get_session
from ..models.user import User
from ..services import feed


router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
)


class MonthlySpendingRead(SQLModel):
    month: str
    label: str
    amount: float


class IncomeVsExpensesRead(SQLModel):
    month: str
    label: str
    income: float
    expenses: float


class CategoryBreakdownRead(SQLModel):
    category_id: uuid.UUID
    name: str
    icon: str
    amount: float


class AnalyticsRead(SQLModel):
    currency: Optional[str] = None
    currencies: List[str]
    monthly_spending: List[MonthlySpendingRead]
    category_breakdown: List[CategoryBreakdownRead]
    income_vs_expenses: List[IncomeVsExpensesRead]


@router.get(
    "",
    response_model=AnalyticsRead,
)
def get_analytics(
    months: int = Query(default=6, ge=1, le=24),
    currency: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Chart data for the last `months` months in one currency.

    - Without `currency`, the currency of the user's first account is used.
    - Category breakdown covers the current month only.
    """
    all_accounts = feed.user_accounts(session, current_user.id)
    currencies = list(dict.fromkeys(a.currency for a in all_accounts))

    selected = currency.strip().upper() if currency else (currencies[0] if currencies else None)
    accounts = [a for a in all_accounts if a.currency == selected]
    if not accounts:
        return AnalyticsRead(
            currency=selected,
            currencies=currencies,
            monthly_spending=[],
            category_breakdown=[],
            income_vs_expenses=[],
        )

    today = date.today()
    transactions = feed.fetch_transactions(
        session,
        [a.id for a in accounts],
        start=window_start(months, today),
        end=today,
    )

    rollup = monthly_rollup(transactions, months, today)
    month_start, month_end = month_bounds(today.year, today.month)

    return AnalyticsRead(
        currency=selected,
        currencies=currencies,
        monthly_spending=[
            MonthlySpendingRead(month=m.month, label=m.label, amount=m.expenses) for m in rollup
        ],
        category_breakdown=[
            CategoryBreakdownRead(category_id=c.category_id, name=c.name, icon=c.icon, amount=c.total)
            for c in category_breakdown(transactions, month_start, month_end)
        ],
        income_vs_expenses=[
            IncomeVsExpensesRead(month=m.month, label=m.label, income=m.income, expenses=m.expenses)
            for m in rollup
        ],
    )
