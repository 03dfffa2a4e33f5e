"""
Database models package.
"""

from app.models.user import User
from app.models.category import Category
from app.models.transaction import Transaction
from app.models.recurring import RecurringTransaction, Frequency, TransactionKind
from app.models.goal import Goal
from app.models.notification import Notification

__all__ = [
    "User",
    "Category",
    "Transaction",
    "RecurringTransaction",
    "Frequency",
    "TransactionKind",
    "Goal",
    "Notification",
]
