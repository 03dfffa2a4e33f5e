"""Service for recurring transaction rules and the pending-transaction generator."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Protocol, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import StorageError
from app.models.recurring import RecurringTransaction, Frequency
from app.models.transaction import Transaction
from app.utils.date_helpers import as_naive_utc

logger = logging.getLogger(__name__)


# Minimum whole days since the last generation before a rule is due again
FREQUENCY_THRESHOLDS = {
    Frequency.daily.value: 1,
    Frequency.weekly.value: 7,
    Frequency.monthly.value: 30,
    Frequency.yearly.value: 365,
}


@dataclass(frozen=True)
class GeneratedTransaction:
    """Transaction row to be written for a due rule."""
    user_id: str
    description: str
    amount: Decimal
    type: str
    category_id: Optional[str]
    date: datetime
    recurring_id: str


@dataclass(frozen=True)
class Due:
    transaction: GeneratedTransaction
    watermark: datetime


@dataclass(frozen=True)
class NotDue:
    pass


Evaluation = Union[Due, NotDue]


def _frequency_value(frequency) -> str:
    if isinstance(frequency, Frequency):
        return frequency.value
    return frequency


def evaluate(rule: RecurringTransaction, now: datetime) -> Evaluation:
    """
    Decide whether a rule has to produce a transaction at ``now``.

    A rule that never generated is always due. Otherwise the whole days
    elapsed since ``last_generated`` (truncated) must reach the threshold of
    its frequency. Unknown frequencies are never due.
    """
    threshold = FREQUENCY_THRESHOLDS.get(_frequency_value(rule.frequency))

    if rule.last_generated is not None:
        if threshold is None:
            return NotDue()
        elapsed = as_naive_utc(now) - as_naive_utc(rule.last_generated)
        if elapsed.days < threshold:
            return NotDue()

    return Due(
        transaction=GeneratedTransaction(
            user_id=rule.user_id,
            description=rule.description,
            amount=rule.amount,
            type=rule.type,
            category_id=rule.category_id,
            date=now,
            recurring_id=rule.id,
        ),
        watermark=now,
    )


class RecurringStore(Protocol):
    """Persistence needed by the generator. Each call is atomic on its own."""

    def list_active_rules(self, user_id: str) -> List[RecurringTransaction]:
        ...

    def insert_transaction(self, instance: GeneratedTransaction) -> Transaction:
        ...

    def update_watermark(self, rule_id: str, timestamp: datetime) -> None:
        ...


class SqlRecurringStore:
    """RecurringStore backed by a SQLAlchemy session, committing per call."""

    def __init__(self, db: Session):
        self.db = db

    def list_active_rules(self, user_id: str) -> List[RecurringTransaction]:
        try:
            return self.db.query(RecurringTransaction).filter(
                RecurringTransaction.user_id == user_id,
                RecurringTransaction.active == True
            ).order_by(RecurringTransaction.created_at).all()
        except SQLAlchemyError as e:
            logger.exception("Failed to load recurring rules for user %s", user_id)
            raise StorageError("Failed to fetch recurring transactions") from e

    def insert_transaction(self, instance: GeneratedTransaction) -> Transaction:
        transaction = Transaction(
            user_id=instance.user_id,
            description=instance.description,
            amount=instance.amount,
            type=instance.type,
            category_id=instance.category_id,
            date=as_naive_utc(instance.date),
            recurring=True,
            recurring_id=instance.recurring_id,
        )
        try:
            self.db.add(transaction)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to create transaction") from e
        return transaction

    def update_watermark(self, rule_id: str, timestamp: datetime) -> None:
        try:
            # Blind write: concurrent runs for the same owner can both generate
            self.db.query(RecurringTransaction).filter(
                RecurringTransaction.id == rule_id
            ).update(
                {RecurringTransaction.last_generated: as_naive_utc(timestamp)},
                synchronize_session="fetch"
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to update recurring transaction") from e


def generate_pending(store: RecurringStore, user_id: str, now: datetime) -> int:
    """
    Create the transactions that are due for every active rule of a user.

    Best effort: the insert and the watermark update are separate writes, and a
    storage failure in either skips that rule without undoing the other. Returns
    the number of rules for which both writes went through.
    """
    rules = store.list_active_rules(user_id)

    # Decide everything before writing: a failed write expires the loaded rules
    pending = []
    for rule in rules:
        result = evaluate(rule, now)
        if isinstance(result, Due):
            pending.append((rule.id, result))

    generated = 0
    for rule_id, result in pending:
        try:
            store.insert_transaction(result.transaction)
        except StorageError:
            logger.warning("Skipping recurring rule %s: transaction insert failed", rule_id, exc_info=True)
            continue

        try:
            store.update_watermark(rule_id, result.watermark)
        except StorageError:
            logger.warning(
                "Recurring rule %s generated a transaction but its watermark was not advanced",
                rule_id,
                exc_info=True
            )
            continue

        generated += 1

    logger.info("Generated %d recurring transactions for user %s", generated, user_id)
    return generated


def get_recurring_rules(db: Session, user_id: str) -> List[RecurringTransaction]:
    """List a user's recurring rules, newest first."""
    return db.query(RecurringTransaction).filter(
        RecurringTransaction.user_id == user_id
    ).order_by(RecurringTransaction.created_at.desc()).all()


def get_recurring_rule(db: Session, user_id: str, rule_id: str) -> Optional[RecurringTransaction]:
    return db.query(RecurringTransaction).filter(
        RecurringTransaction.id == rule_id,
        RecurringTransaction.user_id == user_id
    ).first()


def count_generated_transactions(db: Session, rule_id: str) -> int:
    """Count transactions carrying a rule's back-reference."""
    return db.query(Transaction).filter(
        Transaction.recurring_id == rule_id
    ).count()
