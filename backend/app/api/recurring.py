"""API endpoints for recurring transaction management."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.dependencies import get_db, get_current_user_id
from app.models.recurring import RecurringTransaction, Frequency, TransactionKind
from app.schemas.recurring import (
    RecurringResponse,
    RecurringUpdate,
    RecurringCreate,
    GenerateResponse,
)
from app.services import recurring_service
from app.services.category_service import ensure_usable_category
from app.services.recurring_service import SqlRecurringStore
from app.utils.date_helpers import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recurring", tags=["recurring"])

# Request field name -> column name
_UPDATE_COLUMNS = {"transaction_type": "type"}


def _to_response(db: Session, rule: RecurringTransaction) -> RecurringResponse:
    response = RecurringResponse.model_validate(rule)
    response.transaction_count = recurring_service.count_generated_transactions(db, rule.id)
    return response


@router.get("", response_model=List[RecurringResponse])
def get_recurring(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get all recurring rules."""
    rules = recurring_service.get_recurring_rules(db, user_id)
    return [_to_response(db, rule) for rule in rules]


@router.post("/generate", response_model=GenerateResponse)
def generate_pending(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create the transactions that are due for the user's active rules."""
    count = recurring_service.generate_pending(SqlRecurringStore(db), user_id, utcnow())
    return GenerateResponse(message=f"{count} transactions generated", count=count)


@router.get("/{rule_id}", response_model=RecurringResponse)
def get_recurring_rule(
    rule_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single recurring rule."""
    rule = recurring_service.get_recurring_rule(db, user_id, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Recurring transaction not found")
    return _to_response(db, rule)


@router.post("", response_model=RecurringResponse, status_code=201)
def create_recurring(
    data: RecurringCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create an active recurring rule."""
    ensure_usable_category(db, user_id, data.category_id)
    rule = RecurringTransaction(
        user_id=user_id,
        description=data.description,
        amount=data.amount,
        type=data.transaction_type.value,
        category_id=data.category_id,
        frequency=data.frequency.value,
        active=True,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)

    response = RecurringResponse.model_validate(rule)
    response.transaction_count = 0
    return response


@router.put("/{rule_id}", response_model=RecurringResponse)
def update_recurring(
    rule_id: str,
    update: RecurringUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update a recurring rule, including pausing it with ``active``."""
    update_data = update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    rule = recurring_service.get_recurring_rule(db, user_id, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Recurring transaction not found")

    ensure_usable_category(db, user_id, update_data.get("category_id"))

    for field, value in update_data.items():
        if isinstance(value, (Frequency, TransactionKind)):
            value = value.value
        setattr(rule, _UPDATE_COLUMNS.get(field, field), value)

    db.commit()
    db.refresh(rule)
    return _to_response(db, rule)


@router.delete("/{rule_id}")
def delete_recurring(
    rule_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a recurring rule. Transactions it generated are kept."""
    rule = recurring_service.get_recurring_rule(db, user_id, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Recurring transaction not found")

    db.delete(rule)
    db.commit()
    logger.info("Deleted recurring rule %s", rule_id)
    return {"deleted": True}
