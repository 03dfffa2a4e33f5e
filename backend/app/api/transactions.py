"""
Transaction API endpoints.
"""

from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.dependencies import get_db, get_current_user_id
from app.models.recurring import TransactionKind
from app.models.transaction import Transaction
from app.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
)
from app.services.category_service import ensure_usable_category
from app.utils.date_helpers import utcnow

router = APIRouter(prefix="/transactions", tags=["transactions"])

# Request field name -> column name
_UPDATE_COLUMNS = {"transaction_type": "type"}


def _get_owned(db: Session, user_id: str, transaction_id: str) -> Transaction:
    transaction = db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.user_id == user_id
    ).first()
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.get("", response_model=List[TransactionResponse])
def list_transactions(
    transaction_type: Optional[TransactionKind] = Query(None, alias="type"),
    category_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the user's transactions, newest first"""
    query = db.query(Transaction).filter(Transaction.user_id == user_id)

    if transaction_type:
        query = query.filter(Transaction.type == transaction_type.value)
    if category_id:
        query = query.filter(Transaction.category_id == category_id)
    if start_date:
        query = query.filter(Transaction.date >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.filter(Transaction.date <= datetime.combine(end_date, time.max))

    return query.order_by(Transaction.date.desc()).all()


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single transaction"""
    return _get_owned(db, user_id, transaction_id)


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Record a transaction. Without a date it is dated now."""
    ensure_usable_category(db, user_id, data.category_id)
    transaction = Transaction(
        user_id=user_id,
        description=data.description,
        amount=data.amount,
        type=data.transaction_type.value,
        category_id=data.category_id,
        date=datetime.combine(data.date, time.min) if data.date else utcnow(),
        recurring=False,
    )
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    return transaction


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    update: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update the fields sent by the client"""
    update_data = update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    transaction = _get_owned(db, user_id, transaction_id)
    ensure_usable_category(db, user_id, update_data.get("category_id"))

    for field, value in update_data.items():
        if isinstance(value, TransactionKind):
            value = value.value
        setattr(transaction, _UPDATE_COLUMNS.get(field, field), value)

    db.commit()
    db.refresh(transaction)
    return transaction


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a transaction"""
    transaction = _get_owned(db, user_id, transaction_id)
    db.delete(transaction)
    db.commit()
    return {"deleted": True}
