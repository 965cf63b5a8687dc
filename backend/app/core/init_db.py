import logging

import pymongo

from app.core.constants import INVITATION_STATUS_PENDING
from app.db.mongodb import get_database

logger = logging.getLogger(__name__)


async def create_indexes(db):
    """Creates indexes for all collections to ensure performance."""
    logger.info("Creating database indexes...")

    # Users
    await db["users"].create_index("username", unique=True)
    await db["users"].create_index("email", unique=True)
    await db["users"].create_index("team_id")
    await db["users"].create_index("primary_role")

    # Teams
    await db["teams"].create_index("members.user_id")
    await db["teams"].create_index("leader_id")
    await db["teams"].create_index(
        [("status", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]
    )

    # Invitations
    await db["invitations"].create_index(
        [("to_user_id", pymongo.ASCENDING), ("status", pymongo.ASCENDING)]
    )
    await db["invitations"].create_index("from_user_id")
    await db["invitations"].create_index("team_id")
    # At most one pending invitation per sender and team
    await db["invitations"].create_index(
        [("from_user_id", pymongo.ASCENDING), ("team_id", pymongo.ASCENDING)],
        unique=True,
        partialFilterExpression={"status": INVITATION_STATUS_PENDING},
        name="unique_pending_invitation",
    )

    # Notifications
    await db["notifications"].create_index(
        [("to_user_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]
    )
    await db["notifications"].create_index(
        [("to_user_id", pymongo.ASCENDING), ("read", pymongo.ASCENDING)]
    )

    # Feed
    await db["posts"].create_index([("created_at", pymongo.DESCENDING)])
    await db["posts"].create_index(
        [("author_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]
    )

    # Workspace
    await db["team_tasks"].create_index(
        [("team_id", pymongo.ASCENDING), ("created_at", pymongo.ASCENDING)]
    )
    await db["workspace_logs"].create_index(
        [("team_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]
    )

    # Messaging
    await db["conversations"].create_index(
        [("participants", pymongo.ASCENDING), ("updated_at", pymongo.DESCENDING)]
    )
    await db["messages"].create_index(
        [("conversation_id", pymongo.ASCENDING), ("created_at", pymongo.ASCENDING)]
    )
    await db["messages"].create_index(
        [("participants", pymongo.ASCENDING), ("read", pymongo.ASCENDING)]
    )

    # Skill verifications
    await db["skill_verifications"].create_index(
        [("user_id", pymongo.ASCENDING), ("verified_at", pymongo.DESCENDING)]
    )

    logger.info("Database indexes created successfully.")


async def init_db():
    db = await get_database()
    await create_indexes(db)
