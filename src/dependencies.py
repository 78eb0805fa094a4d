"""FastAPI dependencies: service construction and request authentication."""

import logging
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src import config
from src.auth import TokenService
from src.database import get_db
from src.errors import NotFound, Unauthorized
from src.models import User
from src.services.auth_service import AuthService
from src.services.post_service import PostService
from src.stores import PostStore, UserStore

# Configure logging
logger = logging.getLogger(__name__)

# HTTP Bearer for JWT authentication; missing headers are reported by us
security = HTTPBearer(auto_error=False)


def get_token_service() -> TokenService:
    return TokenService(config.JWT_SECRET_KEY, config.TOKEN_TTL)


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(UserStore(db), tokens)


def get_post_service(db: Session = Depends(get_db)) -> PostService:
    return PostService(PostStore(db))


def _authenticate(token: str, auth_service: AuthService) -> User:
    payload = auth_service.verify_token(token)

    user_id = payload.get("id")
    if user_id is None:
        logger.warning("Token missing id claim")
        raise Unauthorized("Invalid or expired token.")

    try:
        user = auth_service.get_profile(user_id)
    except NotFound:
        user = None

    if user is None or not user.is_active:
        logger.warning(f"Token for missing or inactive user: {user_id}")
        raise Unauthorized("Invalid token or user not found.")

    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Raises:
        Unauthorized: If the token is missing, invalid, expired, or belongs to
            a missing or inactive user
    """
    if credentials is None:
        raise Unauthorized("Access denied. No token provided.")

    user = _authenticate(credentials.credentials, auth_service)
    logger.info(f"User authenticated: {user.email}")
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    """Like get_current_user, but yields None instead of failing the request."""
    if credentials is None:
        return None

    try:
        return _authenticate(credentials.credentials, auth_service)
    except Unauthorized:
        logger.debug("Optional authentication failed, continuing anonymously")
        return None
