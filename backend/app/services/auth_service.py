"""Service for password hashing, bearer tokens and user registration."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, ValidationError
from app.models.user import User
from app.services.cpf_service import is_valid_cpf, normalize_cpf
from app.utils.date_helpers import epoch_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenConfig:
    """Signing parameters, fixed for the lifetime of the process."""
    secret: str
    algorithm: str = "HS256"
    ttl_seconds: int = 86400


def issue_token(
    user_id: str,
    now: datetime,
    config: TokenConfig,
    ttl_seconds: Optional[int] = None
) -> str:
    """Sign a token for ``user_id`` that expires ``ttl_seconds`` after ``now``."""
    ttl = config.ttl_seconds if ttl_seconds is None else ttl_seconds
    claims = {
        "sub": user_id,
        "exp": epoch_seconds(now) + ttl,
    }
    return jwt.encode(claims, config.secret, algorithm=config.algorithm)


def verify_token(token: str, now: datetime, config: TokenConfig) -> Optional[str]:
    """
    Return the user id a token was issued for, or None if it cannot be trusted.

    Malformed tokens, bad signatures, missing claims and expiry all give None;
    callers must not try to tell them apart.
    """
    if not token:
        return None

    try:
        # Expiry is checked against the supplied ``now``, not the wall clock
        claims = jwt.decode(
            token,
            config.secret,
            algorithms=[config.algorithm],
            options={"verify_exp": False},
        )
    except JWTError:
        return None

    subject = claims.get("sub")
    expires_at = claims.get("exp")
    if not isinstance(subject, str) or not subject:
        return None
    if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
        return None
    if expires_at <= epoch_seconds(now):
        return None

    return subject


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Unreadable password hash encountered")
        return False


def register_user(
    db: Session,
    full_name: str,
    email: str,
    password: str,
    cpf: str,
    birth_date,
    phone: str
) -> User:
    """
    Create a user after checking the CPF and uniqueness of e-mail and CPF.
    """
    if not is_valid_cpf(cpf):
        raise ValidationError("Invalid CPF")

    cpf_digits = normalize_cpf(cpf)

    if db.query(User).filter(User.email == email).count() > 0:
        raise ConflictError("Email already registered")
    if db.query(User).filter(User.cpf == cpf_digits).count() > 0:
        raise ConflictError("CPF already registered")

    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(password),
        cpf=cpf_digits,
        birth_date=birth_date,
        phone=phone,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user when e-mail and password match, None otherwise."""
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
