import math
import uuid
import datetime as dt
from datetime import datetime, timezone
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlmodel import SQLModel, Field, Session, select

from ..core.security import get_current_user
from ..database import get_session
from ..models.account import Account
from ..models.category import Category
from ..models.transaction import Transaction, TransactionType
from ..models.user import User
from .accounts import get_owned_account
from .categories import get_visible_category


logger = structlog.get_logger()

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
)

# ─────────────────────────────
#   SCHEMAS (Pydantic/SQLModel)
# ─────────────────────────────

class TransactionBase(SQLModel):
    amount: float = Field(gt=0)
    type: TransactionType
    description: Optional[str] = Field(default=None, max_length=255)
    date: dt.date = Field(default_factory=dt.date.today)
    account_id: uuid.UUID
    category_id: uuid.UUID


class TransactionCreate(TransactionBase):
    pass


class TransactionUpdate(SQLModel):
    amount: Optional[float] = Field(default=None, gt=0)
    type: Optional[TransactionType] = None
    description: Optional[str] = Field(default=None, max_length=255)
    date: Optional[dt.date] = None
    account_id: Optional[uuid.UUID] = None
    category_id: Optional[uuid.UUID] = None


class TransactionRead(TransactionBase):
    id: uuid.UUID
    currency: str
    category_name: str
    category_icon: str
    created_at: datetime
    updated_at: datetime


class TransactionPage(SQLModel):
    transactions: List[TransactionRead]
    total: int
    page: int
    page_size: int
    total_pages: int


def _to_read(tx: Transaction, account: Account, category: Optional[Category]) -> TransactionRead:
    return TransactionRead(
        id=tx.id,
        amount=tx.amount,
        type=tx.type,
        description=tx.description,
        date=tx.date,
        account_id=tx.account_id,
        category_id=tx.category_id,
        currency=account.currency,
        category_name=category.name if category else "",
        category_icon=(category.icon or "") if category else "",
        created_at=tx.created_at,
        updated_at=tx.updated_at,
    )


def _get_owned_transaction(session: Session, transaction_id: uuid.UUID, user_id: uuid.UUID):
    tx = session.get(Transaction, transaction_id)
    account = session.get(Account, tx.account_id) if tx else None
    if not tx or not account or account.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found",
        )
    return tx, account


# ─────────────────────────────
#   ENDPOINTS
# ─────────────────────────────

@router.get(
    "",
    response_model=TransactionPage,
)
def list_transactions(
    category_id: Optional[uuid.UUID] = None,
    type: Optional[TransactionType] = None,
    date_from: Optional[dt.date] = None,
    date_to: Optional[dt.date] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=500),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    List the user's transactions, newest first.

    - Filters: category, type, inclusive date range, description search.
    - Paginated with page / page_size.
    """
    conditions = [Account.user_id == current_user.id]
    if category_id:
        conditions.append(Transaction.category_id == category_id)
    if type:
        conditions.append(Transaction.type == type)
    if date_from:
        conditions.append(Transaction.date >= date_from)
    if date_to:
        conditions.append(Transaction.date <= date_to)
    if search:
        conditions.append(Transaction.description.ilike(f"%{search}%"))

    count_stmt = (
        select(func.count())
        .select_from(Transaction)
        .join(Account, Transaction.account_id == Account.id)
        .where(*conditions)
    )
    total = session.exec(count_stmt).one()

    stmt = (
        select(Transaction, Account, Category)
        .join(Account, Transaction.account_id == Account.id)
        .join(Category, Transaction.category_id == Category.id, isouter=True)
        .where(*conditions)
        .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    rows = session.exec(stmt).all()

    return TransactionPage(
        transactions=[_to_read(tx, account, category) for tx, account, category in rows],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )


@router.post(
    "",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_transaction(
    transaction_in: TransactionCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    account = get_owned_account(session, transaction_in.account_id, current_user.id)
    category = get_visible_category(session, transaction_in.category_id, current_user.id)

    now = datetime.now(timezone.utc)
    tx = Transaction(
        id=uuid.uuid4(),
        account_id=account.id,
        category_id=category.id,
        amount=transaction_in.amount,
        type=transaction_in.type,
        description=transaction_in.description,
        date=transaction_in.date,
        created_at=now,
        updated_at=now,
    )

    session.add(tx)
    session.commit()
    session.refresh(tx)
    logger.info("transaction_created", transaction_id=str(tx.id), type=tx.type.value)
    return _to_read(tx, account, category)


@router.get(
    "/{transaction_id}",
    response_model=TransactionRead,
)
def get_transaction(
    transaction_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tx, account = _get_owned_transaction(session, transaction_id, current_user.id)
    return _to_read(tx, account, session.get(Category, tx.category_id))


@router.patch(
    "/{transaction_id}",
    response_model=TransactionRead,
)
def update_transaction(
    transaction_id: uuid.UUID,
    transaction_in: TransactionUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Partially update one of the user's transactions."""
    tx, account = _get_owned_transaction(session, transaction_id, current_user.id)

    changes = transaction_in.model_dump(exclude_unset=True)
    # description is the only nullable column; null clears it
    changes = {k: v for k, v in changes.items() if v is not None or k == "description"}
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )

    if "account_id" in changes:
        account = get_owned_account(session, changes["account_id"], current_user.id)
    if "category_id" in changes:
        get_visible_category(session, changes["category_id"], current_user.id)

    for name, value in changes.items():
        setattr(tx, name, value)
    tx.updated_at = datetime.now(timezone.utc)

    session.add(tx)
    session.commit()
    session.refresh(tx)
    return _to_read(tx, account, session.get(Category, tx.category_id))


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_transaction(
    transaction_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tx, _account = _get_owned_transaction(session, transaction_id, current_user.id)
    session.delete(tx)
    session.commit()
    logger.info("transaction_deleted", transaction_id=str(transaction_id))
    return
