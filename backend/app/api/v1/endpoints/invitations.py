from typing import List

from fastapi import Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import deps
from app.api.router import CustomAPIRouter
from app.api.v1.helpers.responses import RESP_AUTH_404_409
from app.db.mongodb import get_database
from app.models.user import User
from app.schemas.invitation import InvitationCreate, InvitationRespond, InvitationResponse
from app.services.invitations import InvitationService

router = CustomAPIRouter()


@router.post(
    "/",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**RESP_AUTH_404_409},
)
async def send_invitation(
    invitation_in: InvitationCreate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Invite a user into your team (leader only) or ask to join a team.

    Join requests are always addressed to the team leader.
    """
    return await InvitationService(db).send_invitation(
        from_user_id=current_user.id,
        type=invitation_in.type,
        team_id=invitation_in.team_id,
        to_user_id=invitation_in.to_user_id,
        role=invitation_in.role,
        message=invitation_in.message,
    )


@router.get("/incoming", response_model=List[InvitationResponse])
async def read_incoming_invitations(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Pending invitations and join requests addressed to the current user."""
    return await InvitationService(db).get_incoming_invitations(current_user.id)


@router.get("/outgoing", response_model=List[InvitationResponse])
async def read_outgoing_invitations(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await InvitationService(db).get_outgoing_invitations(current_user.id)


@router.post("/{invitation_id}/respond", response_model=InvitationResponse, responses={**RESP_AUTH_404_409})
async def respond_to_invitation(
    invitation_id: str,
    response_in: InvitationRespond,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Accept or reject a pending invitation. Accepting adds the joining user
    to the team.
    """
    return await InvitationService(db).respond_to_invitation(
        invitation_id, current_user.id, response_in.status, role=response_in.role
    )
