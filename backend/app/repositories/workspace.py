"""
Workspace Repositories

Team tasks and the shared team activity log.
"""

from typing import List

from app.models.workspace import TeamTask, WorkspaceLog
from app.repositories.base import BaseRepository


class TeamTaskRepository(BaseRepository[TeamTask]):
    """Repository for team task database operations."""

    collection_name = "team_tasks"
    model_class = TeamTask

    async def find_by_team(self, team_id: str) -> List[TeamTask]:
        """Tasks of a team, newest first."""
        return await self.find_many({"team_id": team_id}, sort_by="created_at", sort_order=-1, limit=500)

    async def delete_by_team(self, team_id: str) -> int:
        return await self.delete_many({"team_id": team_id})


class WorkspaceLogRepository(BaseRepository[WorkspaceLog]):
    """Repository for workspace log database operations."""

    collection_name = "workspace_logs"
    model_class = WorkspaceLog

    async def find_by_team(self, team_id: str, limit: int = 100) -> List[WorkspaceLog]:
        """Newest log entries of a team."""
        return await self.find_many({"team_id": team_id}, sort_by="created_at", sort_order=-1, limit=limit)

    async def delete_by_team(self, team_id: str) -> int:
        return await self.delete_many({"team_id": team_id})
