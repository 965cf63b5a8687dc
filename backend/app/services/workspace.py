"""
Team workspace: shared task list and activity log.

Only members of a team can read or write its workspace.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.constants import DEFAULT_USER_NAME
from app.core.exceptions import NotFoundError
from app.models.user import User
from app.models.workspace import TeamTask, WorkspaceLog
from app.repositories.workspace import TeamTaskRepository, WorkspaceLogRepository
from app.services.teams import TeamService

logger = logging.getLogger(__name__)


class WorkspaceService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.tasks = TeamTaskRepository(db)
        self.logs = WorkspaceLogRepository(db)
        self.team_service = TeamService(db)

    async def _get_task(self, team_id: str, task_id: str) -> TeamTask:
        task = await self.tasks.get_by_id(task_id)
        if not task or task.team_id != team_id:
            raise NotFoundError("Task not found")
        return task

    async def create_team_task(
        self,
        team_id: str,
        user_id: str,
        title: str,
        assigned_to: Optional[List[str]] = None,
    ) -> TeamTask:
        await self.team_service.get_team_for_member(team_id, user_id)
        task = TeamTask(team_id=team_id, title=title, assigned_to=assigned_to or [], created_by=user_id)
        return await self.tasks.create(task)

    async def get_team_tasks(self, team_id: str, user_id: str) -> List[TeamTask]:
        await self.team_service.get_team_for_member(team_id, user_id)
        return await self.tasks.find_by_team(team_id)

    async def update_team_task(self, team_id: str, task_id: str, user_id: str, data: Dict[str, Any]) -> TeamTask:
        await self.team_service.get_team_for_member(team_id, user_id)
        await self._get_task(team_id, task_id)
        update_data = {k: v for k, v in data.items() if k in ("title", "assigned_to") and v is not None}
        return await self.tasks.update(task_id, update_data)

    async def update_task_completion(self, team_id: str, task_id: str, completed: bool, user_id: str) -> TeamTask:
        await self.team_service.get_team_for_member(team_id, user_id)
        await self._get_task(team_id, task_id)
        return await self.tasks.update(
            task_id,
            {
                "completed": completed,
                "completed_by": user_id if completed else None,
                "completed_at": datetime.now(timezone.utc) if completed else None,
            },
        )

    async def delete_team_task(self, team_id: str, task_id: str, user_id: str) -> None:
        await self.team_service.get_team_for_member(team_id, user_id)
        await self._get_task(team_id, task_id)
        await self.tasks.delete(task_id)

    async def add_workspace_log(self, team_id: str, user: User, message: str) -> WorkspaceLog:
        await self.team_service.get_team_for_member(team_id, user.id)
        log = WorkspaceLog(
            team_id=team_id,
            user_id=user.id,
            user_name=user.full_name or DEFAULT_USER_NAME,
            message=message,
        )
        return await self.logs.create(log)

    async def get_workspace_logs(self, team_id: str, user_id: str) -> List[WorkspaceLog]:
        await self.team_service.get_team_for_member(team_id, user_id)
        return await self.logs.find_by_team(team_id)
