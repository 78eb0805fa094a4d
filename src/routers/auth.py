"""Authentication router for registration, login and profile management."""

import logging
from fastapi import APIRouter, Depends, status

from src.dependencies import get_auth_service, get_current_user
from src.models import User
from src.schemas import (
    AuthData,
    AuthEnvelope,
    MessageResponse,
    ProfileUpdate,
    UserEnvelope,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.services.auth_service import AuthResult, AuthService

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _auth_envelope(result: AuthResult, message: str) -> AuthEnvelope:
    return AuthEnvelope(
        message=message,
        data=AuthData(user=UserResponse.model_validate(result.user), token=result.token),
    )


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthEnvelope)
def register(user_data: UserRegister, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new user and return an access token.

    Raises:
        Conflict: If the email is already registered
    """
    result = auth_service.register(
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=user_data.email,
        password=user_data.password,
    )
    return _auth_envelope(result, "User registered successfully")


@router.post("/login", response_model=AuthEnvelope)
def login(user_data: UserLogin, auth_service: AuthService = Depends(get_auth_service)):
    """
    Authenticate user and return JWT token.

    Raises:
        Unauthorized: If credentials are invalid
    """
    result = auth_service.login(user_data.email, user_data.password)
    return _auth_envelope(result, "Login successful")


@router.get("/profile", response_model=UserEnvelope)
def get_profile(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = auth_service.get_profile(current_user.id)
    return UserEnvelope(
        message="Profile retrieved successfully",
        data=UserResponse.model_validate(user),
    )


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    update_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Update first/last name, bio, profile image or password."""
    user = auth_service.update_profile(current_user.id, update_data.model_dump(exclude_unset=True))
    return UserEnvelope(
        message="Profile updated successfully",
        data=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy."""
    logger.info(f"User logged out: {current_user.email}")
    return MessageResponse(message="Logout successful")
