import uuid
from datetime import datetime, timezone
from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Field, Session, SQLModel, select

from ..config import SUPPORTED_CURRENCIES
from ..core.security import get_current_user
from ..database import get_session
from ..models.account import Account, AccountType
from ..models.transaction import Transaction
from ..models.user import User


logger = structlog.get_logger()

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
)


class AccountBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    type: AccountType = Field(default=AccountType.CHECKING)
    currency: str = Field(default="RON", min_length=3, max_length=3)


class AccountRead(AccountBase):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


def _check_currency(currency: str) -> str:
    code = currency.strip().upper()
    if code not in SUPPORTED_CURRENCIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported currency, expected one of {', '.join(SUPPORTED_CURRENCIES)}",
        )
    return code


def get_owned_account(session: Session, account_id: uuid.UUID, user_id: uuid.UUID) -> Account:
    account = session.get(Account, account_id)
    if not account or account.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return account


@router.get(
    "",
    response_model=List[AccountRead],
)
def list_accounts(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    stmt = (
        select(Account)
        .where(Account.user_id == current_user.id)
        .order_by(Account.created_at.desc())
    )
    return list(session.exec(stmt).all())


@router.post(
    "",
    response_model=AccountRead,
    status_code=status.HTTP_201_CREATED,
)
def create_account(
    payload: AccountBase,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    now = datetime.now(timezone.utc)
    account = Account(
        id=uuid.uuid4(),
        user_id=current_user.id,
        name=payload.name.strip(),
        type=payload.type,
        currency=_check_currency(payload.currency),
        created_at=now,
        updated_at=now,
    )
    session.add(account)
    session.commit()
    session.refresh(account)
    logger.info("account_created", account_id=str(account.id), currency=account.currency)
    return account


@router.put(
    "/{account_id}",
    response_model=AccountRead,
)
def update_account(
    account_id: uuid.UUID,
    payload: AccountBase,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    account = get_owned_account(session, account_id, current_user.id)
    account.name = payload.name.strip()
    account.type = payload.type
    account.currency = _check_currency(payload.currency)
    account.updated_at = datetime.now(timezone.utc)
    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_account(
    account_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Delete an account together with all of its transactions."""
    account = get_owned_account(session, account_id, current_user.id)
    transactions = session.exec(select(Transaction).where(Transaction.account_id == account.id)).all()
    for tx in transactions:
        session.delete(tx)
    session.flush()
    session.delete(account)
    session.commit()
    logger.info("account_deleted", account_id=str(account_id), transactions_deleted=len(transactions))
    return None
