"""
User and authentication schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime
from typing import Optional


class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=3, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    cpf: str
    birth_date: date
    phone: str = Field(..., min_length=1, max_length=30)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=6, max_length=72)
    new_password: str = Field(..., min_length=6, max_length=72)


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=3, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    birth_date: Optional[date] = None


class UserResponse(BaseModel):
    """User as returned to clients. The password hash is never included."""
    id: str
    full_name: str
    email: str
    cpf: str
    birth_date: date
    phone: str
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
