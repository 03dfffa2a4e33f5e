"""
FastAPI dependencies.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.database import get_db
from app.exceptions import AuthError
from app.services.auth_service import TokenConfig, verify_token
from app.utils.date_helpers import utcnow

__all__ = ["get_db", "get_token_config", "get_current_user_id"]

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_config() -> TokenConfig:
    """
    Dependency for the token signing parameters.
    """
    return TokenConfig(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.jwt_expiration,
    )


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    config: TokenConfig = Depends(get_token_config),
) -> str:
    """
    Dependency resolving the authenticated user id from the bearer token.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError()

    user_id = verify_token(credentials.credentials, utcnow(), config)
    if user_id is None:
        raise AuthError()
    return user_id
