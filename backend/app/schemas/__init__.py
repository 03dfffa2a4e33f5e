"""
Pydantic schemas package.
"""

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
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)
from app.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
)
from app.schemas.recurring import (
    RecurringCreate,
    RecurringUpdate,
    RecurringResponse,
    GenerateResponse,
)
from app.schemas.goal import (
    GoalCreate,
    GoalUpdate,
    GoalProgress,
    GoalResponse,
)
from app.schemas.notification import (
    NotificationCreate,
    NotificationResponse,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "ForgotPasswordRequest",
    "ChangePasswordRequest",
    "UserUpdate",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "RecurringCreate",
    "RecurringUpdate",
    "RecurringResponse",
    "GenerateResponse",
    "GoalCreate",
    "GoalUpdate",
    "GoalProgress",
    "GoalResponse",
    "NotificationCreate",
    "NotificationResponse",
]
