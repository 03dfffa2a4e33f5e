"""Tests for the recurring due-date engine and the pending-transaction generator."""

import logging
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app.exceptions import StorageError
from app.models.recurring import RecurringTransaction, Frequency
from app.models.transaction import Transaction
from app.services.recurring_service import (
    Due,
    NotDue,
    SqlRecurringStore,
    count_generated_transactions,
    evaluate,
    generate_pending,
)


NOW = datetime(2024, 6, 15, 9, 0, 0)


def make_rule(frequency="monthly", last_generated=None, rule_id="rule-1", active=True):
    return RecurringTransaction(
        id=rule_id,
        user_id="user-1",
        description="Aluguel",
        amount=Decimal("1500.00"),
        type="expense",
        category_id="cat-1",
        frequency=frequency,
        active=active,
        last_generated=last_generated,
    )


class TestEvaluate:
    """Test due decisions for each frequency."""

    def test_never_generated_is_due(self):
        result = evaluate(make_rule(last_generated=None), NOW)
        assert isinstance(result, Due)
        assert result.watermark == NOW

    def test_due_carries_transaction(self):
        result = evaluate(make_rule(last_generated=None), NOW)
        txn = result.transaction
        assert txn.user_id == "user-1"
        assert txn.description == "Aluguel"
        assert txn.amount == Decimal("1500.00")
        assert txn.type == "expense"
        assert txn.category_id == "cat-1"
        assert txn.date == NOW
        assert txn.recurring_id == "rule-1"

    def test_daily_twelve_hours_not_due(self):
        rule = make_rule("daily", NOW - timedelta(hours=12))
        assert isinstance(evaluate(rule, NOW), NotDue)

    def test_daily_twenty_five_hours_due(self):
        rule = make_rule("daily", NOW - timedelta(hours=25))
        assert isinstance(evaluate(rule, NOW), Due)

    @pytest.mark.parametrize("frequency,threshold", [
        ("daily", 1),
        ("weekly", 7),
        ("monthly", 30),
        ("yearly", 365),
    ])
    def test_threshold_boundaries(self, frequency, threshold):
        just_short = make_rule(frequency, NOW - timedelta(days=threshold, seconds=-1))
        exactly = make_rule(frequency, NOW - timedelta(days=threshold))
        assert isinstance(evaluate(just_short, NOW), NotDue)
        assert isinstance(evaluate(exactly, NOW), Due)

    def test_elapsed_days_are_truncated(self):
        """Six days and 23 hours is still six whole days."""
        rule = make_rule("weekly", NOW - timedelta(days=6, hours=23))
        assert isinstance(evaluate(rule, NOW), NotDue)

    def test_unknown_frequency_never_due(self):
        rule = make_rule("biweekly", NOW - timedelta(days=1000))
        assert isinstance(evaluate(rule, NOW), NotDue)

    def test_frequency_enum_accepted(self):
        rule = make_rule(Frequency.weekly, NOW - timedelta(days=8))
        assert isinstance(evaluate(rule, NOW), Due)

    def test_watermark_in_future_not_due(self):
        rule = make_rule("daily", NOW + timedelta(days=3))
        assert isinstance(evaluate(rule, NOW), NotDue)

    def test_aware_now_against_naive_watermark(self):
        rule = make_rule("daily", NOW - timedelta(hours=30))
        aware_now = NOW.replace(tzinfo=timezone.utc)
        assert isinstance(evaluate(rule, aware_now), Due)

    def test_pure(self):
        """Evaluating does not touch the rule."""
        rule = make_rule("daily", NOW - timedelta(days=2))
        evaluate(rule, NOW)
        assert rule.last_generated == NOW - timedelta(days=2)


class FakeStore:
    """In-memory RecurringStore with switchable failures."""

    def __init__(self, rules, fail_insert=(), fail_watermark=(), fail_list=False):
        self.rules = {rule.id: rule for rule in rules}
        self.inserted = []
        self.fail_insert = set(fail_insert)
        self.fail_watermark = set(fail_watermark)
        self.fail_list = fail_list

    def list_active_rules(self, user_id):
        if self.fail_list:
            raise StorageError("down")
        return [r for r in self.rules.values() if r.user_id == user_id and r.active]

    def insert_transaction(self, instance):
        if instance.recurring_id in self.fail_insert:
            raise StorageError("insert failed")
        self.inserted.append(instance)
        return instance

    def update_watermark(self, rule_id, timestamp):
        if rule_id in self.fail_watermark:
            raise StorageError("update failed")
        self.rules[rule_id].last_generated = timestamp


class TestGeneratePending:
    """Test the generator loop against an in-memory store."""

    def test_generates_for_due_rules_only(self):
        store = FakeStore([
            make_rule("daily", None, rule_id="a"),
            make_rule("daily", NOW - timedelta(hours=2), rule_id="b"),
            make_rule("weekly", NOW - timedelta(days=8), rule_id="c"),
        ])
        count = generate_pending(store, "user-1", NOW)
        assert count == 2
        assert sorted(t.recurring_id for t in store.inserted) == ["a", "c"]
        assert store.rules["a"].last_generated == NOW
        assert store.rules["b"].last_generated == NOW - timedelta(hours=2)

    def test_second_run_with_same_now_generates_nothing(self):
        store = FakeStore([
            make_rule("daily", None, rule_id="a"),
            make_rule("monthly", NOW - timedelta(days=31), rule_id="b"),
        ])
        assert generate_pending(store, "user-1", NOW) == 2
        assert generate_pending(store, "user-1", NOW) == 0
        assert len(store.inserted) == 2

    def test_inactive_rules_ignored(self):
        store = FakeStore([make_rule("daily", None, active=False)])
        assert generate_pending(store, "user-1", NOW) == 0
        assert store.inserted == []

    def test_other_owner_ignored(self):
        store = FakeStore([make_rule("daily", None)])
        assert generate_pending(store, "user-2", NOW) == 0

    def test_insert_failure_skips_rule_and_continues(self, caplog):
        store = FakeStore(
            [make_rule("daily", None, rule_id="a"), make_rule("daily", None, rule_id="b")],
            fail_insert={"a"},
        )
        with caplog.at_level(logging.WARNING):
            count = generate_pending(store, "user-1", NOW)
        assert count == 1
        assert [t.recurring_id for t in store.inserted] == ["b"]
        # Watermark untouched, so the rule is retried on the next run
        assert store.rules["a"].last_generated is None
        assert "Skipping recurring rule a:" in caplog.text

    def test_watermark_failure_not_counted_and_not_rolled_back(self):
        store = FakeStore([make_rule("daily", None, rule_id="a")], fail_watermark={"a"})
        assert generate_pending(store, "user-1", NOW) == 0
        # The inserted transaction stays
        assert len(store.inserted) == 1
        assert store.rules["a"].last_generated is None

    def test_listing_failure_propagates(self):
        store = FakeStore([make_rule("daily", None)], fail_list=True)
        with pytest.raises(StorageError):
            generate_pending(store, "user-1", NOW)

    def test_no_rules(self):
        assert generate_pending(FakeStore([]), "user-1", NOW) == 0


class TestSqlRecurringStore:
    """Test generation against the database."""

    def test_generates_transaction_and_advances_watermark(self, db_session, sample_recurring, sample_user):
        store = SqlRecurringStore(db_session)
        count = generate_pending(store, sample_user.id, NOW)
        assert count == 1

        txn = db_session.query(Transaction).filter(Transaction.recurring_id == sample_recurring.id).one()
        assert txn.user_id == sample_user.id
        assert txn.recurring is True
        assert txn.amount == Decimal("39.90")
        assert txn.type == "expense"
        assert txn.date == NOW

        db_session.refresh(sample_recurring)
        assert sample_recurring.last_generated == NOW

    def test_idempotent_for_same_now(self, db_session, sample_recurring, sample_user):
        store = SqlRecurringStore(db_session)
        assert generate_pending(store, sample_user.id, NOW) == 1
        assert generate_pending(store, sample_user.id, NOW) == 0
        assert count_generated_transactions(db_session, sample_recurring.id) == 1

    def test_next_period(self, db_session, sample_recurring, sample_user):
        store = SqlRecurringStore(db_session)
        generate_pending(store, sample_user.id, NOW)
        assert generate_pending(store, sample_user.id, NOW + timedelta(days=29)) == 0
        assert generate_pending(store, sample_user.id, NOW + timedelta(days=30)) == 1
        assert count_generated_transactions(db_session, sample_recurring.id) == 2

    def test_skips_inactive(self, db_session, sample_recurring, sample_user):
        sample_recurring.active = False
        db_session.commit()
        assert generate_pending(SqlRecurringStore(db_session), sample_user.id, NOW) == 0
        assert db_session.query(Transaction).count() == 0

    def test_list_only_active_for_owner(self, db_session, sample_recurring, other_user):
        store = SqlRecurringStore(db_session)
        assert store.list_active_rules(other_user.id) == []
        assert [r.id for r in store.list_active_rules(sample_recurring.user_id)] == [sample_recurring.id]


class ExpiringRule:
    """Rule whose attributes can no longer be loaded once its store has written."""

    def __init__(self, store, **values):
        self._store = store
        self._values = values

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        if self._store.expired:
            raise StorageError("connection lost")
        return self._values[name]


class ExpiringStore(FakeStore):
    """A write expires every loaded rule, as a session commit or rollback does."""

    def __init__(self, fail_insert=()):
        self.expired = False
        rules = [
            ExpiringRule(
                self, id=rule_id, user_id="user-1", description="Aluguel",
                amount=Decimal("1500.00"), type="expense", category_id=None,
                frequency="daily", active=True, last_generated=None,
            )
            for rule_id in ("a", "b")
        ]
        super().__init__(rules, fail_insert=fail_insert)

    def insert_transaction(self, instance):
        self.expired = True
        return super().insert_transaction(instance)


class TestGeneratePendingAfterWrites:

    def test_failed_insert_does_not_abort_the_batch(self):
        store = ExpiringStore(fail_insert={"a"})
        assert generate_pending(store, "user-1", NOW) == 1
        assert [t.recurring_id for t in store.inserted] == ["b"]

    def test_rules_are_not_reread_between_writes(self):
        store = ExpiringStore()
        assert generate_pending(store, "user-1", NOW) == 2
        assert sorted(t.recurring_id for t in store.inserted) == ["a", "b"]
