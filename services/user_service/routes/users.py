"""
User Routes
Profile management and lookups for other services
"""

from fastapi import APIRouter

from shared.schemas.response import success
from shared.schemas.user import UserUpdateSchema, UserResponseSchema
from services.user_service.services.user_service import UserService
from services.user_service.utils.dependencies import DatabaseDep, CurrentUserId

router = APIRouter()


@router.get("/profile")
@router.get("/me")
async def get_profile(user_id: CurrentUserId, db: DatabaseDep):
    """Get the current user's profile"""
    user = await UserService.get_user(db, user_id)
    return success(UserResponseSchema.model_validate(user))


@router.put("/profile")
@router.put("/me")
async def update_profile(data: UserUpdateSchema, user_id: CurrentUserId, db: DatabaseDep):
    """Partially update the current user's profile"""
    user = await UserService.update_profile(db, user_id, data)
    return success(UserResponseSchema.model_validate(user), "Profile updated")


@router.get("/validate/{user_id}")
async def validate_user(user_id: int, db: DatabaseDep):
    return success(await UserService.validate_by_id(db, user_id))


@router.get("/validate-username/{username}")
async def validate_username(username: str, db: DatabaseDep):
    return success(await UserService.validate_by_username(db, username))
