"""
Transaction schemas.
"""

from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import Optional
from datetime import date as date_type, datetime
from decimal import Decimal

from app.models.recurring import TransactionKind


class TransactionCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    transaction_type: TransactionKind
    category_id: Optional[str] = None
    date: Optional[date_type] = None

    @field_validator("amount")
    @classmethod
    def amount_not_zero(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("Invalid amount")
        return v


class TransactionUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    transaction_type: Optional[TransactionKind] = None
    category_id: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def amount_not_zero(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v == 0:
            raise ValueError("Invalid amount")
        return v


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    description: str
    amount: Decimal
    transaction_type: str = Field(validation_alias=AliasChoices("type", "transaction_type"))
    category_id: Optional[str]
    date: datetime
    recurring: bool
    recurring_id: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
