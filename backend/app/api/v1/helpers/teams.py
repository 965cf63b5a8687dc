"""
Team Helper Functions

Shared helper functions for team-related endpoints.
"""

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.team import Team
from app.models.user import User
from app.repositories import TeamRepository


async def check_team_access(
    team_id: str,
    user: User,
    db: AsyncIOMotorDatabase,
    leader_only: bool = False,
) -> Team:
    """
    Load a team and make sure the user may act on it.

    Members pass by default; with ``leader_only`` only the team leader does.
    """
    team = await TeamRepository(db).get_by_id(team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")

    if leader_only:
        if team.leader_id != user.id:
            raise HTTPException(status_code=403, detail="Only the team leader can do this")
        return team

    if not team.is_member(user.id):
        raise HTTPException(status_code=403, detail="Not a member of this team")
    return team
