from typing import List, Optional

from fastapi import Depends, Query, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import deps
from app.api.router import CustomAPIRouter
from app.api.v1.helpers.responses import RESP_AUTH_400, RESP_AUTH_404
from app.db.mongodb import get_database
from app.models.user import User
from app.schemas.user import (
    UserMe,
    UsernameAvailability,
    UsernameUpdate,
    UserPublic,
    UserUpdateMe,
)
from app.services.profiles import ProfileService

router = CustomAPIRouter()


@router.get("/", response_model=List[UserPublic])
async def read_users(
    q: Optional[str] = Query(None, description="Search full name, primary role and skills"),
    role: Optional[str] = Query(None, description="Exact primary role"),
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Discover people. Without filters every other user is listed.
    """
    service = ProfileService(db)
    if q or role:
        return await service.search_users(text=q, role=role, exclude_user_id=current_user.id)
    return await service.get_all_users(exclude_user_id=current_user.id)


@router.get("/available", response_model=List[UserPublic])
async def read_available_users(
    role: Optional[str] = None,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Users who are not in a team yet, optionally with a given primary role.
    """
    service = ProfileService(db)
    if role:
        return await service.get_available_users_by_role(role, exclude_user_id=current_user.id)
    return await service.get_available_users(exclude_user_id=current_user.id)


@router.get("/roles", response_model=List[str])
async def read_available_roles(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await ProfileService(db).get_available_roles()


@router.get("/me", response_model=UserMe)
async def read_user_me(
    current_user: User = Depends(deps.get_current_active_user),
):
    return current_user


@router.put("/me", response_model=UserMe, responses={**RESP_AUTH_400})
async def update_user_me(
    user_in: UserUpdateMe,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Update own profile. Changing the skills invalidates the current skill
    verification.
    """
    return await ProfileService(db).update_profile(current_user.id, user_in.model_dump(exclude_unset=True))


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_me(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Delete own account. A leader's team is terminated; members leave theirs.
    """
    await ProfileService(db).delete_user_completely(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/me/username", response_model=UserMe, responses={**RESP_AUTH_400})
async def update_username(
    username_in: UsernameUpdate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await ProfileService(db).update_username(current_user.id, username_in.username)


@router.get("/username-available", response_model=UsernameAvailability)
async def check_username_available(
    username: str = Query(..., min_length=1),
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    available = await ProfileService(db).is_username_available(username, exclude_user_id=current_user.id)
    return {"username": username.lower(), "available": available}


@router.get("/by-username/{username}", response_model=UserPublic, responses={**RESP_AUTH_404})
async def read_user_by_username(
    username: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await ProfileService(db).get_profile_by_username(username)


@router.get("/{user_id}", response_model=UserPublic, responses={**RESP_AUTH_404})
async def read_user_by_id(
    user_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await ProfileService(db).get_profile(user_id)
