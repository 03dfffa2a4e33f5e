"""
Recurring transaction database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
import enum
from app.database import Base


class Frequency(str, enum.Enum):
    """Recurring frequency enumeration."""
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


class TransactionKind(str, enum.Enum):
    """Direction of a money movement."""
    income = "income"
    expense = "expense"


class RecurringTransaction(Base):
    """Rule that periodically produces a transaction for its owner."""

    __tablename__ = "recurring_transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String(10), nullable=False)  # income | expense
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    # Plain string so unknown values stored by older clients still load
    frequency = Column(String(20), nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    last_generated = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="recurring_transactions")
