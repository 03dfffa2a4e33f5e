"""
Category API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List

from app.dependencies import get_db, get_current_user_id
from app.models import Category, RecurringTransaction, Transaction
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)

router = APIRouter()

DEFAULT_ICON = "💵"
DEFAULT_COLOR = "#636e72"


def _get_user_category(db: Session, user_id: str, category_id: str) -> Category:
    """Only categories the user created can be changed; defaults are shared."""
    category = db.query(Category).filter(
        Category.id == category_id,
        Category.user_id == user_id,
        Category.is_default == False
    ).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found or not owned by user")
    return category


@router.get("", response_model=List[CategoryResponse])
def list_categories(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List default categories followed by the user's own."""
    return db.query(Category).filter(
        or_(Category.is_default == True, Category.user_id == user_id)
    ).order_by(Category.is_default.desc(), Category.name.asc()).all()


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    category: CategoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a new category."""
    db_category = Category(
        user_id=user_id,
        name=category.name,
        icon=category.icon or DEFAULT_ICON,
        color=category.color or DEFAULT_COLOR,
        type=category.category_type.value,
        is_default=False  # User-created categories are never defaults
    )
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update a category."""
    update_data = category_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    category = _get_user_category(db, user_id, category_id)

    for field, value in update_data.items():
        setattr(category, field, value)

    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a category; its transactions and recurring rules become uncategorized."""
    category = _get_user_category(db, user_id, category_id)

    db.query(Transaction).filter(
        Transaction.category_id == category_id
    ).update({"category_id": None}, synchronize_session=False)

    db.query(RecurringTransaction).filter(
        RecurringTransaction.category_id == category_id
    ).update({"category_id": None}, synchronize_session=False)

    db.delete(category)
    db.commit()
    return {"deleted": True}
