"""
Feed Post Repository

Centralizes all database operations for feed posts.
"""

from typing import List

from app.models.feed import FeedPost
from app.repositories.base import BaseRepository


class PostRepository(BaseRepository[FeedPost]):
    """Repository for feed post database operations."""

    collection_name = "posts"
    model_class = FeedPost

    async def find_feed(self, limit: int = 50) -> List[FeedPost]:
        """Newest posts across all authors."""
        return await self.find_many({}, sort_by="created_at", sort_order=-1, limit=limit)

    async def find_by_author(self, author_id: str, limit: int = 100) -> List[FeedPost]:
        return await self.find_many(
            {"author_id": author_id},
            sort_by="created_at",
            sort_order=-1,
            limit=limit,
        )

    async def delete_by_author(self, author_id: str) -> int:
        return await self.delete_many({"author_id": author_id})
