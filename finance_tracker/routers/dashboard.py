from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, SQLModel

from ..analytics.aggregation import period_summary
from ..analytics.currency import partition_by_currency
from ..analytics.periods import PERIODS, period_window
from ..config import settings
from ..core.security import get_current_user
from ..database import get_session
from ..models.user import User
from ..services import feed


router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


class DashboardSummaryRead(SQLModel):
    currency: str
    total_income: float
    total_expenses: float
    balance: float
    transaction_count: int


@router.get(
    "",
    response_model=List[DashboardSummaryRead],
)
def get_dashboard(
    period: str = "this-month",
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """One summary per account currency for the selected period."""
    if period not in PERIODS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid period")

    accounts = feed.user_accounts(session, current_user.id)
    if not accounts:
        return [
            DashboardSummaryRead(
                currency=settings.default_currency,
                total_income=0,
                total_expenses=0,
                balance=0,
                transaction_count=0,
            )
        ]

    start, end = period_window(period, date.today())
    transactions = feed.fetch_transactions(session, [a.id for a in accounts], start=start, end=end)
    groups = partition_by_currency(transactions, feed.account_currencies(accounts))

    summaries = []
    for currency, group in groups.items():
        summary = period_summary(group)
        summaries.append(
            DashboardSummaryRead(
                currency=currency,
                total_income=summary.total_income,
                total_expenses=summary.total_expenses,
                balance=summary.balance,
                transaction_count=summary.transaction_count,
            )
        )
    return summaries
