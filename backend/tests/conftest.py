"""Shared test fixtures."""

import os

# Keep the app's own engine off the filesystem while tests import it
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date, datetime, timedelta
from decimal import Decimal

from app.database import Base, get_db
from app.dependencies import get_token_config
from app.main import app
from app.models.user import User
from app.models.category import Category
from app.models.transaction import Transaction
from app.models.recurring import RecurringTransaction
from app.models.goal import Goal
from app.models.notification import Notification
from app.services.auth_service import hash_password, issue_token
from app.utils.date_helpers import utcnow


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def token_config():
    return get_token_config()


def _make_user(db_session, full_name, email, cpf):
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password("secret123"),
        cpf=cpf,
        birth_date=date(1990, 5, 17),
        phone="+55 11 91234-5678",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_user(db_session):
    """Create a user whose password is ``secret123``."""
    return _make_user(db_session, "Ana Souza", "ana@alphabank.com.br", "52998224725")


@pytest.fixture
def other_user(db_session):
    """A second user, for ownership checks."""
    return _make_user(db_session, "Bruno Lima", "bruno@alphabank.com.br", "11144477735")


@pytest.fixture
def auth_headers(sample_user, token_config):
    token = issue_token(sample_user.id, utcnow(), token_config)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(other_user, token_config):
    token = issue_token(other_user.id, utcnow(), token_config)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def default_category(db_session):
    """Create a shared default category."""
    category = Category(
        name="Alimentação",
        icon="🍔",
        color="#e17055",
        type="expense",
        is_default=True
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_category(db_session, sample_user):
    """Create a category owned by the sample user."""
    category = Category(
        user_id=sample_user.id,
        name="Mercado",
        icon="🛒",
        color="#22c55e",
        type="expense",
        is_default=False
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_transaction(db_session, sample_user, sample_category):
    """Create a sample transaction."""
    txn = Transaction(
        user_id=sample_user.id,
        description="Supermercado Extra",
        amount=Decimal("50.00"),
        type="expense",
        category_id=sample_category.id,
        date=datetime(2024, 1, 15, 10, 30),
        recurring=False
    )
    db_session.add(txn)
    db_session.commit()
    db_session.refresh(txn)
    return txn


@pytest.fixture
def sample_recurring(db_session, sample_user, sample_category):
    """Create a monthly rule that has never generated."""
    rule = RecurringTransaction(
        user_id=sample_user.id,
        description="Netflix",
        amount=Decimal("39.90"),
        type="expense",
        category_id=sample_category.id,
        frequency="monthly",
        active=True,
        last_generated=None
    )
    db_session.add(rule)
    db_session.commit()
    db_session.refresh(rule)
    return rule


@pytest.fixture
def sample_goal(db_session, sample_user):
    """Create a sample goal."""
    goal = Goal(
        user_id=sample_user.id,
        name="Viagem",
        target_amount=Decimal("5000.00"),
        current_amount=Decimal("0"),
        deadline=date.today() + timedelta(days=180),
        icon="✈️"
    )
    db_session.add(goal)
    db_session.commit()
    db_session.refresh(goal)
    return goal


@pytest.fixture
def sample_notification(db_session, sample_user):
    """Create an unread notification."""
    notification = Notification(
        user_id=sample_user.id,
        title="Bem-vinda",
        message="Sua conta foi criada",
        type="info",
        read=False
    )
    db_session.add(notification)
    db_session.commit()
    db_session.refresh(notification)
    return notification
