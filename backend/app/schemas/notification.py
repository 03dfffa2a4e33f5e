"""Pydantic schemas for notifications."""

from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime


class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    notification_type: Optional[str] = Field(None, max_length=20)


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    notification_type: str = Field(validation_alias=AliasChoices("type", "notification_type"))
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
