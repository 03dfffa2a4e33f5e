"""Lookups for categories a user is allowed to reference."""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.exceptions import ValidationError
from app.models.category import Category


def get_usable_category(db: Session, user_id: str, category_id: str) -> Optional[Category]:
    """A default category or one the user created."""
    return db.query(Category).filter(
        Category.id == category_id,
        or_(Category.is_default == True, Category.user_id == user_id)
    ).first()


def ensure_usable_category(db: Session, user_id: str, category_id: Optional[str]) -> None:
    """Reject a category id that does not exist or belongs to someone else."""
    if category_id is None:
        return
    if get_usable_category(db, user_id, category_id) is None:
        raise ValidationError("Invalid category")
