"""
User API Routes

Handles:
- User registration
- User login (bearer token generation)
- Current user retrieval
"""

from datetime import timedelta
from typing import Annotated, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordBearer
from loguru import logger

from bookstore.api.dependencies import (
    Settings,
    get_app_settings,
    get_client_ip,
    get_user_repository,
)
from bookstore.api.middleware.error_handler import AuthenticationError, ValidationError
from bookstore.api.schemas import UserCreate, UserLogin, UserResponse, TokenResponse, ErrorResponse
from bookstore.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_access_token,
)
from bookstore.storage.user_repository import StoredUser

router = APIRouter(prefix="/users", tags=["users"])

# Reads "Authorization: Bearer <token>"; a missing header is handled below
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/users/login", auto_error=False)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Email already registered"}},
)
def register(user: UserCreate, repo = Depends(get_user_repository)):
    """Register a new user."""
    if repo.get_by_email(user.email):
        raise ValidationError("Email already registered")

    new_user = repo.create(
        id=str(uuid4()),
        email=user.email,
        hashed_password=get_password_hash(user.password),
        name=user.name,
    )
    logger.info(f"Registered user {new_user.id}")
    return new_user


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse, "description": "Incorrect email or password"}},
)
def login(
    credentials: UserLogin,
    repo = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
    client_ip: str = Depends(get_client_ip),
):
    """
    Login endpoint.
    Returns a signed bearer token if credentials are valid.
    """
    user = repo.get_by_email(credentials.email)

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Failed login from {client_ip}")
        raise AuthenticationError("Incorrect email or password")

    access_token = create_access_token(
        data={"sub": user.id},
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    repo = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
) -> StoredUser:
    """Dependency to get current authenticated user."""
    if not token:
        raise AuthenticationError("Not authenticated")

    user_id = decode_access_token(token, settings.jwt_secret_key, settings.jwt_algorithm)
    if user_id is None:
        raise AuthenticationError()

    user = repo.get(user_id)
    if user is None or not user.is_active:
        raise AuthenticationError()

    return user


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid token"}},
)
def read_users_me(
    current_user: Annotated[StoredUser, Depends(get_current_user)],
):
    """Get current user profile."""
    return current_user
