import uuid
from datetime import datetime, timezone
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlmodel import Field, Session, SQLModel, select

from ..core.security import get_current_user
from ..database import get_session
from ..models.category import Category
from ..models.transaction import Transaction
from ..models.user import User
from ..services import feed


logger = structlog.get_logger()

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
)


class CategoryWrite(SQLModel):
    name: str = Field(min_length=1, max_length=50)
    icon: Optional[str] = Field(default=None, max_length=16)
    keywords: Optional[List[str]] = None


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    icon: str
    keywords: List[str]
    is_default: bool
    user_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


def _clean_keywords(keywords: Optional[List[str]]) -> List[str]:
    return [kw.strip().lower() for kw in (keywords or []) if kw.strip()]


def get_visible_category(session: Session, category_id: uuid.UUID, user_id: uuid.UUID) -> Category:
    """A default category or one of the user's own; anything else is a 404."""
    category = session.get(Category, category_id)
    if not category or (not category.is_default and category.user_id != user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


def _get_editable_category(session: Session, category_id: uuid.UUID, user_id: uuid.UUID, action: str) -> Category:
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    if category.is_default:
        logger.warning("default_category_change_rejected", category_id=str(category_id), action=action)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Cannot {action} default categories",
        )
    if category.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get(
    "",
    response_model=List[CategoryRead],
)
def list_categories(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Default categories plus the user's custom ones, ordered by name."""
    return feed.visible_categories(session, current_user.id)


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: CategoryWrite,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    now = datetime.now(timezone.utc)
    category = Category(
        id=uuid.uuid4(),
        name=payload.name.strip(),
        icon=payload.icon or "📁",
        keywords=_clean_keywords(payload.keywords),
        is_default=False,
        user_id=current_user.id,
        created_at=now,
        updated_at=now,
    )
    session.add(category)
    session.commit()
    session.refresh(category)
    logger.info("category_created", category_id=str(category.id), keywords=len(category.keywords))
    return category


@router.put(
    "/{category_id}",
    response_model=CategoryRead,
)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryWrite,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    category = _get_editable_category(session, category_id, current_user.id, "edit")

    category.name = payload.name.strip()
    if payload.icon is not None:
        category.icon = payload.icon
    if payload.keywords is not None:
        category.keywords = _clean_keywords(payload.keywords)
    category.updated_at = datetime.now(timezone.utc)

    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    category = _get_editable_category(session, category_id, current_user.id, "delete")

    in_use = session.exec(
        select(func.count()).select_from(Transaction).where(Transaction.category_id == category.id)
    ).one()
    if in_use > 0:
        logger.warning("category_delete_rejected", category_id=str(category_id), transactions=in_use)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot delete: {in_use} transactions use this category",
        )

    session.delete(category)
    session.commit()
    logger.info("category_deleted", category_id=str(category_id))
    return None
