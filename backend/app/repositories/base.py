"""
Base Repository

Typed access to one collection. Documents are keyed by string UUIDs under
``_id`` and converted to the repository's Pydantic model on the way out.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import BaseModel
from pymongo import ReturnDocument

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Subclasses name their collection and model:

        class PostRepository(BaseRepository[FeedPost]):
            collection_name = "posts"
            model_class = FeedPost
    """

    collection_name: str
    model_class: Type[T]

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection: AsyncIOMotorCollection = db[self.collection_name]

    def _to_model(self, data: Optional[Dict[str, Any]]) -> Optional[T]:
        return self.model_class(**data) if data is not None else None

    async def get_by_id(self, id: str) -> Optional[T]:
        return self._to_model(await self.collection.find_one({"_id": id}))

    async def find_one(self, query: Dict[str, Any]) -> Optional[T]:
        return self._to_model(await self.collection.find_one(query))

    async def find_many(
        self,
        query: Dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort_by: Optional[str] = None,
        sort_order: int = 1,
    ) -> List[T]:
        """Models matching ``query``, optionally sorted, at most ``limit`` of them."""
        cursor = self.collection.find(query)
        if sort_by:
            cursor = cursor.sort(sort_by, sort_order)
        docs = await cursor.skip(skip).limit(limit).to_list(limit)
        return [self.model_class(**doc) for doc in docs]

    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        return await self.collection.count_documents(query or {})

    async def create(self, model: T) -> T:
        await self.collection.insert_one(model.model_dump(by_alias=True))
        return model

    async def update(self, id: str, update_data: Dict[str, Any]) -> Optional[T]:
        """Apply ``$set`` and return the document as stored afterwards."""
        if not update_data:
            return await self.get_by_id(id)
        data = await self.collection.find_one_and_update(
            {"_id": id},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(data)

    async def update_raw(self, id: str, update_ops: Dict[str, Any]) -> None:
        """Run arbitrary update operators ($set, $inc, ...) against one document."""
        await self.collection.update_one({"_id": id}, update_ops)

    async def update_many(self, query: Dict[str, Any], update_data: Dict[str, Any]) -> int:
        result = await self.collection.update_many(query, {"$set": update_data})
        return result.modified_count

    async def delete(self, id: str) -> bool:
        result = await self.collection.delete_one({"_id": id})
        return result.deleted_count > 0

    async def delete_many(self, query: Dict[str, Any]) -> int:
        result = await self.collection.delete_many(query)
        return result.deleted_count
