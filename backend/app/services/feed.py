"""
Social feed.

System posts are written by the team workflow (team created, member joined);
user posts are authored, edited and deleted by their owner only.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.config import settings
from app.core.constants import DEFAULT_USER_NAME, POST_TYPE_USER_POST
from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.models.feed import FeedPost
from app.models.user import User
from app.repositories.posts import PostRepository
from app.repositories.users import UserRepository

logger = logging.getLogger(__name__)


class FeedService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.posts = PostRepository(db)
        self.users = UserRepository(db)

    async def create_feed_post(self, author: Optional[User], author_id: str, **fields: Any) -> FeedPost:
        """Write a post on behalf of a user, copying their display fields."""
        post = FeedPost(
            author_id=author_id,
            author_name=author.full_name if author and author.full_name else DEFAULT_USER_NAME,
            author_avatar=author.avatar if author else None,
            author_role=author.primary_role if author else None,
            **fields,
        )
        await self.posts.create(post)
        return post

    async def create_user_post(
        self,
        user_id: str,
        title: str,
        description: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> FeedPost:
        author = await self.users.get_by_id(user_id)
        return await self.create_feed_post(
            author,
            user_id,
            type=POST_TYPE_USER_POST,
            title=title,
            description=description,
            tags=tags or [],
        )

    async def _get_own_post(self, post_id: str, user_id: str) -> FeedPost:
        post = await self.posts.get_by_id(post_id)
        if not post:
            raise NotFoundError("Post not found")
        if post.author_id != user_id:
            raise PermissionDeniedError("You can only modify your own posts")
        return post

    async def update_post(self, post_id: str, user_id: str, data: Dict[str, Any]) -> FeedPost:
        await self._get_own_post(post_id, user_id)
        update_data = {k: v for k, v in data.items() if v is not None}
        update_data["updated_at"] = datetime.now(timezone.utc)
        return await self.posts.update(post_id, update_data)

    async def delete_post(self, post_id: str, user_id: str) -> None:
        await self._get_own_post(post_id, user_id)
        await self.posts.delete(post_id)

    async def get_user_posts(self, user_id: str) -> List[FeedPost]:
        return await self.posts.find_by_author(user_id)

    async def get_feed_posts(self) -> List[FeedPost]:
        return await self.posts.find_feed(limit=settings.FEED_PAGE_SIZE)
