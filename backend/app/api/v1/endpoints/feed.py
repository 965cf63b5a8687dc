from typing import List

from fastapi import Depends, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import deps
from app.api.router import CustomAPIRouter
from app.api.v1.helpers.responses import RESP_AUTH_404
from app.db.mongodb import get_database
from app.models.user import User
from app.schemas.feed import PostCreate, PostResponse, PostUpdate
from app.services.feed import FeedService

router = CustomAPIRouter()


@router.get("/", response_model=List[PostResponse])
async def read_feed(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    The activity feed: user posts plus automatic team and membership events.
    """
    return await FeedService(db).get_feed_posts()


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: PostCreate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await FeedService(db).create_user_post(
        current_user.id, post_in.title, post_in.description, post_in.tags
    )


@router.get("/users/{user_id}", response_model=List[PostResponse])
async def read_user_posts(
    user_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await FeedService(db).get_user_posts(user_id)


@router.put("/{post_id}", response_model=PostResponse, responses={**RESP_AUTH_404})
async def update_post(
    post_id: str,
    post_in: PostUpdate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await FeedService(db).update_post(post_id, current_user.id, post_in.model_dump(exclude_unset=True))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, responses={**RESP_AUTH_404})
async def delete_post(
    post_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    await FeedService(db).delete_post(post_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
