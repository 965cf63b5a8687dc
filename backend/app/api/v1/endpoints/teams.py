from typing import List

from fastapi import Depends, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import deps
from app.api.router import CustomAPIRouter
from app.api.v1.helpers.responses import RESP_AUTH_404, RESP_AUTH_404_409
from app.api.v1.helpers.teams import check_team_access
from app.db.mongodb import get_database
from app.models.user import User
from app.schemas.invitation import InvitationResponse
from app.schemas.team import TeamCreate, TeamMemberProfile, TeamResponse, TeamUpdate
from app.schemas.workspace import (
    TaskCompletionUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    WorkspaceLogCreate,
    WorkspaceLogResponse,
)
from app.services.teams import TeamService
from app.services.workspace import WorkspaceService

router = CustomAPIRouter()


@router.post("/", response_model=TeamResponse, status_code=status.HTTP_201_CREATED, responses={**RESP_AUTH_404_409})
async def create_team(
    team_in: TeamCreate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Create a new team. The creator becomes its leader and first member.
    """
    return await TeamService(db).create_team(current_user, team_in.model_dump())


@router.get("/", response_model=List[TeamResponse])
async def read_available_teams(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Teams that are still forming and have a free slot, newest first.
    """
    return await TeamService(db).get_available_teams()


@router.get("/mine", response_model=List[TeamResponse])
async def read_my_teams(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await TeamService(db).get_user_teams(current_user.id)


@router.get("/{team_id}", response_model=TeamResponse, responses={**RESP_AUTH_404})
async def read_team(
    team_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await TeamService(db).get_team(team_id)


@router.put("/{team_id}", response_model=TeamResponse, responses={**RESP_AUTH_404})
async def update_team(
    team_id: str,
    team_in: TeamUpdate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    await check_team_access(team_id, current_user, db, leader_only=True)
    return await TeamService(db).update_team(team_id, current_user.id, team_in.model_dump(exclude_unset=True))


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT, responses={**RESP_AUTH_404})
async def terminate_team(
    team_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Terminate a team. All members are released and its invitations,
    tasks and logs are deleted.
    """
    await TeamService(db).terminate_team(team_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{team_id}/members", response_model=List[TeamMemberProfile], responses={**RESP_AUTH_404})
async def read_team_members(
    team_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await TeamService(db).get_team_members(team_id)


@router.delete("/{team_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT, responses={**RESP_AUTH_404})
async def remove_team_member(
    team_id: str,
    user_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Remove a member (leader) or leave the team (member removing themself).
    """
    await TeamService(db).remove_team_member(team_id, user_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{team_id}/join-requests", response_model=List[InvitationResponse], responses={**RESP_AUTH_404})
async def read_join_requests(
    team_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    await check_team_access(team_id, current_user, db, leader_only=True)
    return await TeamService(db).get_join_requests(team_id, current_user.id)


# Workspace: tasks


@router.get("/{team_id}/tasks", response_model=List[TaskResponse], responses={**RESP_AUTH_404})
async def read_team_tasks(
    team_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await WorkspaceService(db).get_team_tasks(team_id, current_user.id)


@router.post(
    "/{team_id}/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**RESP_AUTH_404},
)
async def create_team_task(
    team_id: str,
    task_in: TaskCreate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await WorkspaceService(db).create_team_task(
        team_id, current_user.id, task_in.title, task_in.assigned_to
    )


@router.put("/{team_id}/tasks/{task_id}", response_model=TaskResponse, responses={**RESP_AUTH_404})
async def update_team_task(
    team_id: str,
    task_id: str,
    task_in: TaskUpdate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await WorkspaceService(db).update_team_task(
        team_id, task_id, current_user.id, task_in.model_dump(exclude_unset=True)
    )


@router.put("/{team_id}/tasks/{task_id}/completion", response_model=TaskResponse, responses={**RESP_AUTH_404})
async def update_task_completion(
    team_id: str,
    task_id: str,
    completion_in: TaskCompletionUpdate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await WorkspaceService(db).update_task_completion(
        team_id, task_id, completion_in.completed, current_user.id
    )


@router.delete("/{team_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses={**RESP_AUTH_404})
async def delete_team_task(
    team_id: str,
    task_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    await WorkspaceService(db).delete_team_task(team_id, task_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Workspace: activity log


@router.get("/{team_id}/logs", response_model=List[WorkspaceLogResponse], responses={**RESP_AUTH_404})
async def read_workspace_logs(
    team_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await WorkspaceService(db).get_workspace_logs(team_id, current_user.id)


@router.post(
    "/{team_id}/logs",
    response_model=WorkspaceLogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**RESP_AUTH_404},
)
async def add_workspace_log(
    team_id: str,
    log_in: WorkspaceLogCreate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await WorkspaceService(db).add_workspace_log(team_id, current_user, log_in.message)
