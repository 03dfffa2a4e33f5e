"""Pydantic schemas for savings goals."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal


class GoalCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    target_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    deadline: date
    icon: Optional[str] = Field(None, max_length=50)


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    target_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    deadline: Optional[date] = None
    icon: Optional[str] = Field(None, min_length=1, max_length=50)


class GoalProgress(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class GoalResponse(BaseModel):
    id: str
    user_id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: date
    icon: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
