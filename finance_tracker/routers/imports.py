import datetime as dt
import uuid
from datetime import datetime, timezone
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Field, Session, SQLModel

from ..analytics.categorize import auto_categorize, select_fallback_category
from ..core.security import get_current_user
from ..database import get_session
from ..models.transaction import Transaction, TransactionType
from ..models.user import User
from ..services import feed
from .accounts import get_owned_account


logger = structlog.get_logger()

router = APIRouter(
    prefix="/import",
    tags=["import"],
)

MAX_IMPORT_ROWS = 5000


class ImportRow(SQLModel):
    amount: float = Field(gt=0)
    type: TransactionType
    description: Optional[str] = Field(default=None, max_length=255)
    date: dt.date
    category_id: Optional[uuid.UUID] = None


class ImportIn(SQLModel):
    account_id: uuid.UUID
    rows: List[ImportRow] = Field(min_length=1, max_length=MAX_IMPORT_ROWS)


class ImportOut(SQLModel):
    created: int
    auto_categorized: int


class CategorizeIn(SQLModel):
    descriptions: List[str] = Field(default_factory=list, max_length=MAX_IMPORT_ROWS)


class CategorizeOut(SQLModel):
    category_ids: List[Optional[uuid.UUID]]


@router.post(
    "",
    response_model=ImportOut,
    status_code=status.HTTP_201_CREATED,
)
def import_transactions(
    payload: ImportIn,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Bulk-create already parsed statement rows into one of the user's accounts.

    Rows without a category go through keyword auto-categorization and fall
    back to "Other" (or the first category) when no keyword matches.
    """
    account = get_owned_account(session, payload.account_id, current_user.id)

    categories = feed.visible_categories(session, current_user.id)
    visible_ids = {c.id for c in categories}
    candidates = feed.category_keywords(categories)
    fallback_id = select_fallback_category(candidates)

    now = datetime.now(timezone.utc)
    auto_categorized = 0
    for idx, row in enumerate(payload.rows):
        category_id = row.category_id
        if category_id is None:
            category_id = auto_categorize(row.description, candidates)
            if category_id is None:
                category_id = fallback_id
            else:
                auto_categorized += 1
        if category_id is None or category_id not in visible_ids:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Row {idx + 1}: unknown category",
            )

        session.add(
            Transaction(
                id=uuid.uuid4(),
                account_id=account.id,
                category_id=category_id,
                amount=row.amount,
                type=row.type,
                description=row.description or None,
                date=row.date,
                created_at=now,
                updated_at=now,
            )
        )

    session.commit()
    logger.info(
        "transactions_imported",
        account_id=str(account.id),
        created=len(payload.rows),
        auto_categorized=auto_categorized,
    )
    return ImportOut(created=len(payload.rows), auto_categorized=auto_categorized)


@router.post(
    "/categorize",
    response_model=CategorizeOut,
)
def categorize_descriptions(
    payload: CategorizeIn,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Suggest a category per description; null where no keyword matches."""
    candidates = feed.category_keywords(feed.visible_categories(session, current_user.id))
    return CategorizeOut(category_ids=[auto_categorize(d, candidates) for d in payload.descriptions])
