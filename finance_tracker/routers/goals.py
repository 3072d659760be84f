import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Field, Session, SQLModel, select

from ..analytics.money import round_money
from ..config import SUPPORTED_CURRENCIES, settings
from ..core.security import get_current_user
from ..database import get_session
from ..models.goal import SavingsGoal
from ..models.user import User


logger = structlog.get_logger()

router = APIRouter(
    prefix="/goals",
    tags=["goals"],
)


class GoalCreate(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    target_amount: float = Field(gt=0)
    currency: str = Field(default=settings.default_currency, min_length=3, max_length=3)
    deadline: Optional[date] = None


class GoalUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    target_amount: Optional[float] = Field(default=None, gt=0)
    current_amount: Optional[float] = Field(default=None, ge=0)
    deadline: Optional[date] = None


class GoalAmount(SQLModel):
    amount: float = Field(gt=0)


class GoalRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    target_amount: float
    current_amount: float
    currency: str
    deadline: Optional[date] = None
    progress: float
    is_completed: bool
    created_at: datetime
    updated_at: datetime


def _to_read(goal: SavingsGoal) -> GoalRead:
    progress = goal.current_amount / goal.target_amount * 100 if goal.target_amount > 0 else 0.0
    return GoalRead(
        id=goal.id,
        user_id=goal.user_id,
        name=goal.name,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        currency=goal.currency,
        deadline=goal.deadline,
        progress=round_money(min(progress, 100.0)),
        is_completed=goal.current_amount >= goal.target_amount,
        created_at=goal.created_at,
        updated_at=goal.updated_at,
    )


def _get_owned_goal(session: Session, goal_id: uuid.UUID, user_id: uuid.UUID, lock: bool = False) -> SavingsGoal:
    stmt = select(SavingsGoal).where(SavingsGoal.id == goal_id)
    if lock:
        # Row lock held until commit so concurrent deposits don't lose updates
        stmt = stmt.with_for_update()
    goal = session.exec(stmt).first()
    if not goal or goal.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal


@router.get(
    "",
    response_model=List[GoalRead],
)
def list_goals(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    stmt = (
        select(SavingsGoal)
        .where(SavingsGoal.user_id == current_user.id)
        .order_by(SavingsGoal.created_at.desc())
    )
    return [_to_read(g) for g in session.exec(stmt).all()]


@router.post(
    "",
    response_model=GoalRead,
    status_code=status.HTTP_201_CREATED,
)
def create_goal(
    payload: GoalCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    currency = payload.currency.strip().upper()
    if currency not in SUPPORTED_CURRENCIES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported currency")

    now = datetime.now(timezone.utc)
    goal = SavingsGoal(
        id=uuid.uuid4(),
        user_id=current_user.id,
        name=payload.name.strip(),
        target_amount=payload.target_amount,
        current_amount=0,
        currency=currency,
        deadline=payload.deadline,
        created_at=now,
        updated_at=now,
    )
    session.add(goal)
    session.commit()
    session.refresh(goal)
    logger.info("goal_created", goal_id=str(goal.id), target=goal.target_amount)
    return _to_read(goal)


@router.put(
    "/{goal_id}",
    response_model=GoalRead,
)
def update_goal(
    goal_id: uuid.UUID,
    payload: GoalUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Full edit of a goal; the only place current_amount may be set directly."""
    goal = _get_owned_goal(session, goal_id, current_user.id, lock=True)

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
    for name in ("name", "target_amount", "current_amount"):
        if changes.get(name) is None:
            changes.pop(name, None)
    for name, value in changes.items():
        setattr(goal, name, value)
    goal.updated_at = datetime.now(timezone.utc)

    session.add(goal)
    session.commit()
    session.refresh(goal)
    return _to_read(goal)


def _apply_amount(session: Session, goal: SavingsGoal, delta: float) -> SavingsGoal:
    goal.current_amount = round_money(max(0.0, goal.current_amount + delta))
    goal.updated_at = datetime.now(timezone.utc)
    session.add(goal)
    session.commit()
    session.refresh(goal)
    return goal


@router.post(
    "/{goal_id}/deposit",
    response_model=GoalRead,
)
def deposit(
    goal_id: uuid.UUID,
    payload: GoalAmount,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    goal = _get_owned_goal(session, goal_id, current_user.id, lock=True)
    goal = _apply_amount(session, goal, payload.amount)
    logger.info("goal_deposit", goal_id=str(goal_id), amount=payload.amount, balance=goal.current_amount)
    return _to_read(goal)


@router.post(
    "/{goal_id}/withdraw",
    response_model=GoalRead,
)
def withdraw(
    goal_id: uuid.UUID,
    payload: GoalAmount,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Withdraw from a goal; the balance stops at 0 instead of going negative."""
    goal = _get_owned_goal(session, goal_id, current_user.id, lock=True)
    goal = _apply_amount(session, goal, -payload.amount)
    logger.info("goal_withdraw", goal_id=str(goal_id), amount=payload.amount, balance=goal.current_amount)
    return _to_read(goal)


@router.delete(
    "/{goal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_goal(
    goal_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    goal = _get_owned_goal(session, goal_id, current_user.id)
    session.delete(goal)
    session.commit()
    logger.info("goal_deleted", goal_id=str(goal_id))
    return None
