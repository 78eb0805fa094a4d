"""Registration, login and profile management."""

import logging
from typing import NamedTuple

from src.auth import TokenService, hash_password, verify_password
from src.errors import Conflict, NotFound, Unauthorized
from src.models import User, UserRole
from src.stores import UserStore

# Configure logging
logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

# Profile fields a user may change about themselves
PROFILE_FIELDS = ("first_name", "last_name", "bio", "profile_image", "password")


class AuthResult(NamedTuple):
    user: User
    token: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Orchestrates users, password hashing and identity tokens."""

    def __init__(self, users: UserStore, tokens: TokenService):
        self.users = users
        self.tokens = tokens

    def _issue_token(self, user: User) -> str:
        return self.tokens.issue({
            "id": user.id,
            "email": user.email,
            "role": user.role.value,
        })

    def register(self, first_name: str, last_name: str, email: str, password: str) -> AuthResult:
        """
        Create a user account and log it in.

        Raises:
            Conflict: If the email is already registered
        """
        email = normalize_email(email)
        logger.info(f"Registration attempt for email: {email}")

        if self.users.find_by_email(email):
            logger.warning(f"Registration failed: Email already exists - {email}")
            raise Conflict("User with this email already exists")

        user = self.users.create(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=hash_password(password),
            role=UserRole.USER,
            is_active=True,
        )

        logger.info(f"User registered successfully: {email}")
        return AuthResult(user, self._issue_token(user))

    def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate an active user.

        Unknown emails and wrong passwords fail with the same error.

        Raises:
            Unauthorized: If the credentials do not match an active user
        """
        email = normalize_email(email)
        logger.info(f"Login attempt for email: {email}")

        user = self.users.find_active_by_email(email)
        if not user:
            logger.warning(f"Login failed: No active user - {email}")
            raise Unauthorized(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: Invalid password - {email}")
            raise Unauthorized(INVALID_CREDENTIALS)

        logger.info(f"User logged in successfully: {email}")
        return AuthResult(user, self._issue_token(user))

    def get_profile(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def update_profile(self, user_id: str, patch: dict) -> User:
        """
        Apply whitelisted profile changes; a new password is always re-hashed.

        Raises:
            NotFound: If the user does not exist
        """
        user = self.get_profile(user_id)

        fields = {name: value for name, value in patch.items() if name in PROFILE_FIELDS}
        password = fields.pop("password", None)
        if password:
            fields["password_hash"] = hash_password(password)

        user = self.users.update(user, fields)
        logger.info(f"Profile updated for user {user_id}: {sorted(fields)}")
        return user

    def verify_token(self, token: str) -> dict:
        """
        Raises:
            Unauthorized: If the token is invalid or expired
        """
        return self.tokens.verify(token)

    def ensure_admin(self, email: str, password: str) -> User:
        """Create an admin account unless the email is already registered."""
        email = normalize_email(email)
        existing = self.users.find_by_email(email)
        if existing:
            logger.info(f"Admin user already exists: {email}")
            return existing

        user = self.users.create(
            first_name="Site",
            last_name="Admin",
            email=email,
            password_hash=hash_password(password),
            role=UserRole.ADMIN,
            is_active=True,
        )
        logger.info(f"Admin user created successfully: {email}")
        return user
