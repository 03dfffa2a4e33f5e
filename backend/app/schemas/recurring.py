"""Pydantic schemas for recurring transactions."""

from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.models.recurring import Frequency, TransactionKind


class RecurringCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    transaction_type: TransactionKind
    category_id: Optional[str] = None
    frequency: Frequency


class RecurringUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    transaction_type: Optional[TransactionKind] = None
    category_id: Optional[str] = None
    frequency: Optional[Frequency] = None
    active: Optional[bool] = None


class RecurringResponse(BaseModel):
    id: str
    user_id: str
    description: str
    amount: Decimal
    transaction_type: str = Field(validation_alias=AliasChoices("type", "transaction_type"))
    category_id: Optional[str] = None
    frequency: str
    active: bool
    last_generated: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    # Computed fields added by API
    transaction_count: Optional[int] = None

    class Config:
        from_attributes = True


class GenerateResponse(BaseModel):
    message: str
    count: int
