"""User-scoped reads that feed the analytics package.

Everything returned here belongs to the given user; the analytics functions
trust their input and never re-check ownership.
"""

import uuid
from datetime import date
from typing import Dict, List, Optional

from sqlmodel import Session, or_, select

from ..analytics.records import BudgetLimit, CategoryKeywords, TransactionRecord
from ..models.account import Account
from ..models.budget import Budget
from ..models.category import Category
from ..models.transaction import Transaction


def user_accounts(session: Session, user_id: uuid.UUID, currency: Optional[str] = None) -> List[Account]:
    stmt = select(Account).where(Account.user_id == user_id)
    if currency:
        stmt = stmt.where(Account.currency == currency)
    stmt = stmt.order_by(Account.created_at.asc())
    return list(session.exec(stmt).all())


def account_currencies(accounts: List[Account]) -> Dict[uuid.UUID, str]:
    return {a.id: a.currency for a in accounts}


def to_record(tx: Transaction, category: Optional[Category]) -> TransactionRecord:
    return TransactionRecord(
        id=tx.id,
        amount=float(tx.amount),
        type=tx.type.value if hasattr(tx.type, "value") else str(tx.type),
        date=tx.date,
        category_id=tx.category_id,
        account_id=tx.account_id,
        description=tx.description,
        category_name=category.name if category else "",
        category_icon=(category.icon or "") if category else "",
    )


def fetch_transactions(
    session: Session,
    account_ids: List[uuid.UUID],
    start: Optional[date] = None,
    end: Optional[date] = None,
    type: Optional[str] = None,
) -> List[TransactionRecord]:
    """Transactions of the given accounts within ``[start, end]``, newest first."""
    if not account_ids:
        return []

    stmt = (
        select(Transaction, Category)
        .join(Category, Transaction.category_id == Category.id, isouter=True)
        .where(Transaction.account_id.in_(account_ids))
    )
    if start is not None:
        stmt = stmt.where(Transaction.date >= start)
    if end is not None:
        stmt = stmt.where(Transaction.date <= end)
    if type is not None:
        stmt = stmt.where(Transaction.type == type)
    stmt = stmt.order_by(Transaction.date.desc())

    return [to_record(tx, category) for tx, category in session.exec(stmt).all()]


def visible_categories_stmt(user_id: uuid.UUID):
    return (
        select(Category)
        .where(or_(Category.is_default == True, Category.user_id == user_id))  # noqa: E712
        .order_by(Category.name.asc())
    )


def visible_categories(session: Session, user_id: uuid.UUID) -> List[Category]:
    """Default categories plus the user's own, ordered by name."""
    return list(session.exec(visible_categories_stmt(user_id)).all())


def category_keywords(categories: List[Category]) -> List[CategoryKeywords]:
    return [
        CategoryKeywords(
            id=c.id,
            name=c.name,
            keywords=tuple(c.keywords or ()),
            is_default=c.is_default,
        )
        for c in categories
    ]


def budget_limits(session: Session, user_id: uuid.UUID, month: int, year: int) -> List[BudgetLimit]:
    stmt = (
        select(Budget, Category)
        .join(Category, Budget.category_id == Category.id, isouter=True)
        .where(Budget.user_id == user_id, Budget.month == month, Budget.year == year)
        .order_by(Budget.created_at.asc())
    )
    return [
        BudgetLimit(
            budget_id=b.id,
            category_id=b.category_id,
            monthly_limit=float(b.monthly_limit),
            month=b.month,
            year=b.year,
            category_name=category.name if category else "",
            category_icon=(category.icon or "") if category else "",
        )
        for b, category in session.exec(stmt).all()
    ]
