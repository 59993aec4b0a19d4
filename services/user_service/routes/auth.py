"""
Authentication Routes
Registration, login, token refresh and identity validation
"""

from fastapi import APIRouter, Path, status

from shared.schemas.response import success
from shared.schemas.user import (
    UserCreateSchema, UserLoginSchema, RefreshTokenSchema, UserResponseSchema,
)
from services.user_service.services.auth_service import AuthService
from services.user_service.utils.dependencies import DatabaseDep

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: UserCreateSchema, db: DatabaseDep):
    """Register a new user account"""
    user = await AuthService.register(db, data)
    return success(UserResponseSchema.model_validate(user), "Registration successful")


@router.post("/login")
async def login(data: UserLoginSchema, db: DatabaseDep):
    """Login with username or email and receive a token pair"""
    tokens = await AuthService.login(db, data)
    return success(tokens, "Login successful")


@router.post("/refresh")
async def refresh(data: RefreshTokenSchema, db: DatabaseDep):
    """Exchange a refresh token for a new token pair"""
    tokens = await AuthService.refresh(db, data.refresh_token)
    return success(tokens, "Token refreshed")


@router.get("/check-username/{username}")
async def check_username(db: DatabaseDep, username: str = Path(..., min_length=1, max_length=50)):
    """data is true when the username is still available"""
    return success(await AuthService.is_username_available(db, username))


@router.get("/check-email/{email}")
async def check_email(db: DatabaseDep, email: str = Path(..., min_length=3, max_length=100)):
    """data is true when the email is still available"""
    return success(await AuthService.is_email_available(db, email))


@router.get("/validate-user/{user_id}/{username}")
async def validate_user(user_id: int, username: str, db: DatabaseDep):
    """Used by the gateway to confirm a token's identity still resolves"""
    return success(await AuthService.validate_user(db, user_id, username))
