"""
Team membership workflow.

A user belongs to at most one team and a team never holds more than
``max_members`` members. Both invariants are checked up front for a clear
error message and enforced again by conditional single-document updates
(see UserRepository.claim_team and TeamRepository.add_member), so concurrent
joins cannot break them.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.config import settings
from app.core.constants import (
    DEFAULT_USER_NAME,
    POST_TYPE_MEMBER_JOINED,
    POST_TYPE_TEAM_CREATED,
    TEAM_ROLE_LEADER,
    TEAM_STATUS_FORMING,
)
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from app.core.metrics import teams_created_total, teams_terminated_total
from app.models.invitation import Invitation
from app.models.team import Team, TeamMember
from app.models.user import User
from app.repositories.invitations import InvitationRepository
from app.repositories.teams import TeamRepository
from app.repositories.users import UserRepository
from app.repositories.workspace import TeamTaskRepository, WorkspaceLogRepository
from app.services.feed import FeedService

logger = logging.getLogger(__name__)


class TeamService:
    """
    Creates teams and moves users in and out of them.

    Usage:
        service = TeamService(db)
        team = await service.create_team(current_user, {"name": "Hackers"})
        await service.add_team_member(team.id, other_user_id, "Backend Developer")
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.teams = TeamRepository(db)
        self.users = UserRepository(db)
        self.invitations = InvitationRepository(db)
        self.tasks = TeamTaskRepository(db)
        self.logs = WorkspaceLogRepository(db)
        self.feed = FeedService(db)

    async def get_team(self, team_id: str) -> Team:
        team = await self.teams.get_by_id(team_id)
        if not team:
            raise NotFoundError("Team not found")
        return team

    async def get_team_for_member(self, team_id: str, user_id: str) -> Team:
        team = await self.get_team(team_id)
        if not team.is_member(user_id):
            raise PermissionDeniedError("Not a member of this team")
        return team

    async def get_team_for_leader(
        self, team_id: str, user_id: str, message: str = "Only team leader can manage the team"
    ) -> Team:
        team = await self.get_team(team_id)
        if team.leader_id != user_id:
            raise PermissionDeniedError(message)
        return team

    async def get_user_teams(self, user_id: str) -> List[Team]:
        """Teams the user belongs to. Zero or one by construction."""
        return await self.teams.find_by_member(user_id)

    async def get_available_teams(self) -> List[Team]:
        return await self.teams.find_available()

    async def create_team(self, leader: User, data: Dict[str, Any]) -> Team:
        if leader.team_id:
            raise ConflictError("You are already in a team")

        leader_name = leader.full_name or DEFAULT_USER_NAME
        team = Team(
            name=data["name"],
            description=data.get("description"),
            leader_id=leader.id,
            leader_name=leader_name,
            members=[TeamMember(user_id=leader.id, role=TEAM_ROLE_LEADER, user_name=leader_name)],
            max_members=data.get("max_members") or settings.DEFAULT_TEAM_MAX_MEMBERS,
            roles_needed=data.get("roles_needed") or [],
            hackathon=data.get("hackathon"),
        )
        await self.teams.create(team)

        if not await self.users.claim_team(leader.id, team.id, is_leader=True):
            # Lost a race against another join or create
            await self.teams.delete(team.id)
            raise ConflictError("You are already in a team")

        await self.feed.create_feed_post(
            leader,
            leader.id,
            type=POST_TYPE_TEAM_CREATED,
            title=f"🚀 Created team: {team.name}",
            description=team.description,
            team_id=team.id,
            team_name=team.name,
            roles_needed=team.roles_needed,
        )
        teams_created_total.inc()
        logger.info(f"Team {team.id} ({team.name}) created by {leader.id}")
        return team

    async def update_team(self, team_id: str, user_id: str, data: Dict[str, Any]) -> Team:
        team = await self.get_team_for_leader(team_id, user_id, message="Only team leader can update the team")

        update_data = {k: v for k, v in data.items() if v is not None}
        max_members = update_data.get("max_members")
        if max_members is not None and max_members < len(team.members):
            raise ValidationFailedError("max_members cannot be lower than the current member count")

        update_data["updated_at"] = datetime.now(timezone.utc)
        return await self.teams.update(team_id, update_data)

    async def add_team_member(self, team_id: str, user_id: str, role: str) -> Team:
        profile = await self.users.get_by_id(user_id)
        if not profile:
            raise NotFoundError("User not found")
        if profile.team_id:
            raise ConflictError("User is already in a team")

        team = await self.teams.get_by_id(team_id)
        if not team:
            raise NotFoundError("Team not found")
        if team.status != TEAM_STATUS_FORMING:
            raise ConflictError("Team is not accepting new members")
        if team.is_full:
            raise ConflictError("Team is full")

        user_name = profile.full_name or DEFAULT_USER_NAME

        if not await self.users.claim_team(user_id, team_id, is_leader=False):
            raise ConflictError("User is already in a team")

        member = TeamMember(user_id=user_id, role=role, user_name=user_name)
        if not await self.teams.add_member(team_id, member.model_dump()):
            await self.users.release_team(user_id)
            raise ConflictError("Team is full")

        await self.feed.create_feed_post(
            profile,
            user_id,
            type=POST_TYPE_MEMBER_JOINED,
            title=f"🎉 Joined team: {team.name}",
            description=f"{user_name} joined as {role}",
            team_id=team_id,
            team_name=team.name,
        )
        logger.info(f"User {user_id} joined team {team_id} as {role}")
        return await self.get_team(team_id)

    async def get_team_members(self, team_id: str) -> List[Dict[str, Any]]:
        """Members of a team joined with their current profiles."""
        team = await self.get_team(team_id)
        profiles = await self.users.find_by_ids([m.user_id for m in team.members])
        profile_map = {p.id: p for p in profiles}

        members = []
        for member in team.members:
            entry: Dict[str, Any] = {
                "user_id": member.user_id,
                "role": member.role,
                "joined_at": member.joined_at,
                "full_name": member.user_name,
            }
            profile = profile_map.get(member.user_id)
            if profile:
                entry.update(
                    username=profile.username,
                    full_name=profile.full_name or member.user_name,
                    avatar=profile.avatar,
                    primary_role=profile.primary_role,
                    skills=profile.skills,
                )
            members.append(entry)
        return members

    async def remove_team_member(self, team_id: str, user_id: str, acting_user_id: str) -> None:
        """The leader removes a member, or a member leaves on their own."""
        team = await self.get_team(team_id)

        if acting_user_id not in (team.leader_id, user_id):
            raise PermissionDeniedError("Only the team leader can remove other members")
        if user_id == team.leader_id:
            raise ValidationFailedError("The team leader cannot leave the team, terminate it instead")
        if not team.is_member(user_id):
            raise NotFoundError("User is not a member of this team")

        await self.teams.remove_member(team_id, user_id)
        await self.users.release_team(user_id)
        logger.info(f"User {user_id} removed from team {team_id} by {acting_user_id}")

    async def terminate_team(self, team_id: str, leader_id: str) -> None:
        team = await self.get_team_for_leader(team_id, leader_id, message="Only team leader can terminate the team")
        await self._dissolve(team)
        logger.info(f"Team {team_id} terminated by leader {leader_id}")

    async def _dissolve(self, team: Team) -> None:
        for member in team.members:
            await self.users.release_team(member.user_id)
        # Also catches profiles that point at the team without a member entry
        await self.users.release_team_for_members(team.id)

        await self.invitations.delete_by_team(team.id)
        await self.tasks.delete_by_team(team.id)
        await self.logs.delete_by_team(team.id)
        await self.teams.delete(team.id)
        teams_terminated_total.inc()

    async def get_join_requests(self, team_id: str, user_id: str) -> List[Invitation]:
        await self.get_team_for_leader(team_id, user_id, message="Only team leader can view join requests")
        return await self.invitations.find_join_requests(team_id)

    async def release_user(self, user: User) -> Optional[str]:
        """
        Detach a user from their team before the account goes away.

        A leader's team is terminated and its members released; a regular
        member is simply removed. Returns the affected team id.
        """
        if not user.team_id:
            return None

        team = await self.teams.get_by_id(user.team_id)
        if not team:
            return None

        if team.leader_id == user.id:
            await self._dissolve(team)
            logger.info(f"Team {team.id} dissolved because its leader {user.id} was deleted")
        else:
            await self.teams.remove_member(team.id, user.id)
        return team.id
