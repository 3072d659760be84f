import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Field, Session, SQLModel, select

from ..analytics.budgets import evaluate_budgets
from ..analytics.periods import month_bounds
from ..analytics.records import EXPENSE
from ..core.security import get_current_user
from ..database import get_session
from ..models.budget import Budget
from ..models.user import User
from ..services import feed
from .categories import get_visible_category


logger = structlog.get_logger()

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
)


class BudgetCreate(SQLModel):
    category_id: uuid.UUID
    monthly_limit: float = Field(gt=0)
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2020, le=2100)


class BudgetRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    category_id: uuid.UUID
    monthly_limit: float
    month: int
    year: int
    created_at: datetime
    updated_at: datetime


class BudgetStatusRead(SQLModel):
    id: uuid.UUID
    category_id: uuid.UUID
    category_name: str
    category_icon: str
    month: int
    year: int
    monthly_limit: float
    spent: float
    remaining: float
    is_over: bool
    percentage: float


@router.get(
    "",
    response_model=List[BudgetStatusRead],
    status_code=status.HTTP_200_OK,
)
def list_budgets(
    month: Optional[int] = None,
    year: Optional[int] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Budgets of the month with what has been spent against each one."""
    today = date.today()
    month = month or today.month
    year = year or today.year
    if not 1 <= month <= 12 or not 2020 <= year <= 2100:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid month")

    limits = feed.budget_limits(session, current_user.id, month, year)
    accounts = feed.user_accounts(session, current_user.id)
    first_day, last_day = month_bounds(year, month)
    transactions = feed.fetch_transactions(
        session,
        [a.id for a in accounts],
        start=first_day,
        end=last_day,
        type=EXPENSE,
    )

    return [
        BudgetStatusRead(
            id=s.budget_id,
            category_id=s.category_id,
            category_name=s.category_name,
            category_icon=s.category_icon,
            month=s.month,
            year=s.year,
            monthly_limit=s.limit,
            spent=s.spent,
            remaining=s.remaining,
            is_over=s.is_over,
            percentage=s.percentage,
        )
        for s in evaluate_budgets(limits, transactions, month, year)
    ]


@router.post(
    "",
    response_model=BudgetRead,
    status_code=status.HTTP_201_CREATED,
)
def upsert_budget(
    payload: BudgetCreate,
    response: Response,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    get_visible_category(session, payload.category_id, current_user.id)

    now = datetime.now(timezone.utc)

    existing = session.exec(
        select(Budget).where(
            Budget.user_id == current_user.id,
            Budget.category_id == payload.category_id,
            Budget.month == payload.month,
            Budget.year == payload.year,
        )
    ).first()

    if existing is None:
        b = Budget(
            id=uuid.uuid4(),
            user_id=current_user.id,
            category_id=payload.category_id,
            monthly_limit=payload.monthly_limit,
            month=payload.month,
            year=payload.year,
            created_at=now,
            updated_at=now,
        )
        session.add(b)
        session.commit()
        session.refresh(b)
        logger.info("budget_created", budget_id=str(b.id), month=b.month, year=b.year)
        return b

    # One budget per category and month: a repeat POST only moves the limit
    existing.monthly_limit = payload.monthly_limit
    existing.updated_at = now
    session.add(existing)
    session.commit()
    session.refresh(existing)
    logger.info("budget_updated", budget_id=str(existing.id), monthly_limit=existing.monthly_limit)
    response.status_code = status.HTTP_200_OK
    return existing


@router.delete(
    "/{budget_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_budget(
    budget_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    b = session.get(Budget, budget_id)
    if not b or b.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    session.delete(b)
    session.commit()
    logger.info("budget_deleted", budget_id=str(budget_id))
    return None
