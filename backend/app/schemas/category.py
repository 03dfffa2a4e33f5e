"""
Category Pydantic schemas for API validation.
"""

from pydantic import AliasChoices, BaseModel, Field
from datetime import datetime
from typing import Optional

from app.models.recurring import TransactionKind


class CategoryCreate(BaseModel):
    """Schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    category_type: TransactionKind


class CategoryUpdate(BaseModel):
    """Schema for updating a category."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = Field(None, min_length=1, max_length=50)
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class CategoryResponse(BaseModel):
    """Schema for category response."""
    id: str
    user_id: Optional[str]
    name: str
    icon: str
    color: str
    category_type: str = Field(validation_alias=AliasChoices("type", "category_type"))
    is_default: bool
    created_at: datetime

    class Config:
        from_attributes = True
