from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, SQLModel

from ..analytics.aggregation import category_totals, monthly_rollup
from ..analytics.forecast import forecast_expenses
from ..analytics.insights import generate_insights
from ..analytics.periods import month_bounds, shift_month, window_start
from ..analytics.recurring import LOOKBACK_MONTHS, detect_recurring
from ..core.security import get_current_user
from ..database import get_session
from ..models.user import User
from ..services import feed


router = APIRouter(
    prefix="/insights",
    tags=["insights"],
)


class TrendRead(SQLModel):
    month: str
    label: str
    expenses: float
    income: float


class ForecastRead(SQLModel):
    month: str
    currency: str
    avg_monthly_expenses: float
    avg_monthly_income: float
    current_month_expenses: float
    current_month_income: float
    projected_expenses: float
    over_pace: bool
    overage_percent: Optional[int] = None


class RecurringRead(SQLModel):
    description: str
    amount: float
    occurrences: int
    last_date: date
    currency: str


class InsightRead(SQLModel):
    type: str
    message: str


class InsightsRead(SQLModel):
    currency: Optional[str] = None
    forecast: Optional[ForecastRead] = None
    recurring: List[RecurringRead]
    insights: List[InsightRead]
    trend: List[TrendRead]


@router.get(
    "",
    response_model=InsightsRead,
)
def get_insights(
    currency: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Six-month trend, current-month forecast, recurring charges and smart insights."""
    all_accounts = feed.user_accounts(session, current_user.id)
    selected = currency.strip().upper() if currency else (all_accounts[0].currency if all_accounts else None)
    accounts = [a for a in all_accounts if a.currency == selected]
    if not accounts:
        return InsightsRead(currency=selected, forecast=None, recurring=[], insights=[], trend=[])

    today = date.today()
    transactions = feed.fetch_transactions(
        session,
        [a.id for a in accounts],
        start=window_start(LOOKBACK_MONTHS, today),
        end=today,
    )

    trend = monthly_rollup(transactions, LOOKBACK_MONTHS, today)
    forecast = forecast_expenses(trend, today)
    recurring = detect_recurring(transactions, LOOKBACK_MONTHS, today=today)

    this_start, this_end = month_bounds(today.year, today.month)
    prior_year, prior_month = shift_month(today.year, today.month, -1)
    prior_start, prior_end = month_bounds(prior_year, prior_month)
    insights = generate_insights(
        category_totals(transactions, this_start, this_end),
        category_totals(transactions, prior_start, prior_end),
        forecast.current_month_income,
        forecast.current_month_expenses,
        currency=selected,
        forecast=forecast,
    )

    return InsightsRead(
        currency=selected,
        forecast=ForecastRead(currency=selected, **asdict(forecast)),
        recurring=[RecurringRead(currency=selected, **asdict(r)) for r in recurring],
        insights=[InsightRead(**asdict(i)) for i in insights],
        trend=[TrendRead(**asdict(m)) for m in trend],
    )
