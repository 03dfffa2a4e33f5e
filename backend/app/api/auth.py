"""
Authentication and profile API endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.dependencies import get_db, get_current_user_id, get_token_config
from app.models.user import User
from app.schemas.user import (
    RegisterRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ChangePasswordRequest,
    UserUpdate,
    UserResponse,
    AuthResponse,
    MessageResponse,
)
from app.services import auth_service
from app.services.auth_service import TokenConfig
from app.utils.date_helpers import utcnow

logger = logging.getLogger(__name__)

# Public routes
router = APIRouter(prefix="/auth", tags=["auth"])

# Routes that need a bearer token
profile_router = APIRouter(tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    config: TokenConfig = Depends(get_token_config)
):
    """Create an account and return a token for it."""
    user = auth_service.register_user(
        db,
        full_name=data.full_name,
        email=data.email,
        password=data.password,
        cpf=data.cpf,
        birth_date=data.birth_date,
        phone=data.phone,
    )
    token = auth_service.issue_token(user.id, utcnow(), config)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    config: TokenConfig = Depends(get_token_config)
):
    """Exchange e-mail and password for a token."""
    user = auth_service.authenticate(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = auth_service.issue_token(user.id, utcnow(), config)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    request: ForgotPasswordRequest,
    db: Session = Depends(get_db)
):
    """Same answer whether or not the e-mail exists."""
    exists = db.query(User).filter(User.email == request.email).count() > 0
    if exists:
        # TODO: send the recovery e-mail once an outbound mail provider is configured
        logger.info("Password recovery requested for a registered address")
    return MessageResponse(message="If the email exists, a recovery link will be sent")


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    data: ChangePasswordRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Replace the password after checking the current one."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if not auth_service.verify_password(data.old_password, user.password_hash):
        raise HTTPException(status_code=401, detail="Current password is incorrect")

    user.password_hash = auth_service.hash_password(data.new_password)
    db.commit()
    return MessageResponse(message="Password changed successfully")


@profile_router.get("/me", response_model=UserResponse)
def get_me(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get the authenticated user."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@profile_router.put("/me", response_model=UserResponse)
def update_me(
    update: UserUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update profile fields."""
    update_data = update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if "email" in update_data:
        taken = db.query(User).filter(
            User.email == update_data["email"],
            User.id != user_id
        ).count()
        if taken:
            raise HTTPException(status_code=409, detail="Email already in use")

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user
