"""Authentication utilities for JWT and password hashing."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from src import config
from src.errors import InvalidToken, TokenExpired

# Configure logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=config.BCRYPT_ROUNDS,
)


def _truncate(password: str) -> str:
    # Bcrypt has a 72-byte limit, truncate if necessary
    password_bytes = password.encode('utf-8')[:72]
    return password_bytes.decode('utf-8', errors='ignore')


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt with a random per-hash salt.

    Bcrypt has a maximum password length of 72 bytes. Passwords longer than
    this are truncated to prevent errors.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    logger.debug("Hashing password")
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to verify against

    Returns:
        bool: True if password matches, False otherwise
    """
    logger.debug("Verifying password")
    return pwd_context.verify(_truncate(plain_password), hashed_password)


class TokenService:
    """Issues and verifies signed, expiring identity tokens."""

    def __init__(self, secret: str, ttl: Optional[timedelta] = None, algorithm: str = config.ALGORITHM):
        self.secret = secret
        self.ttl = ttl if ttl is not None else config.TOKEN_TTL
        self.algorithm = algorithm

    def issue(self, payload: dict) -> str:
        """
        Create a JWT carrying the payload plus issued-at and expiry claims.

        Args:
            payload: Claims to encode, normally {id, email, role}

        Returns:
            str: Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        to_encode = payload.copy()
        to_encode.update({"iat": now, "exp": now + self.ttl})

        logger.info(f"Creating access token for user: {payload.get('id')}")
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """
        Decode and verify a JWT token.

        Raises:
            TokenExpired: If the token is past its expiry
            InvalidToken: If the token is malformed or the signature is wrong
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.warning("Expired token received")
            raise TokenExpired()
        except JWTError as e:
            logger.warning(f"Token decode error: {e}")
            raise InvalidToken()

        logger.debug("Token decoded successfully")
        return payload
