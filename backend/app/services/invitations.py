"""
Invitations and join requests.

An ``invite`` goes from a team leader to a user without a team; a
``join_request`` goes from a user without a team to the team leader. At most
one pending invitation exists per (sender, team); the unique partial index on
the collection backs the pre-check against races.
"""

import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.core.constants import (
    DEFAULT_USER_NAME,
    INVITATION_STATUS_ACCEPTED,
    INVITATION_STATUS_PENDING,
    INVITATION_STATUS_REJECTED,
    INVITATION_TYPE_INVITE,
    INVITATION_TYPE_JOIN_REQUEST,
    NOTIFICATION_TYPE_ACCEPTED,
    NOTIFICATION_TYPE_INVITE,
    NOTIFICATION_TYPE_JOIN_REQUEST,
    NOTIFICATION_TYPE_REJECTED,
    TEAM_ROLE_DEFAULT,
    TEAM_STATUS_FORMING,
)
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    TeamUpError,
    ValidationFailedError,
)
from app.core.metrics import invitations_resolved_total, invitations_sent_total
from app.models.invitation import Invitation
from app.repositories.invitations import InvitationRepository
from app.repositories.teams import TeamRepository
from app.repositories.users import UserRepository
from app.services.notifications import NotificationService
from app.services.teams import TeamService

logger = logging.getLogger(__name__)


def _duplicate_message(invitation_type: str) -> str:
    if invitation_type == INVITATION_TYPE_JOIN_REQUEST:
        return "Join request already sent"
    return "Invitation already sent"


class InvitationService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.invitations = InvitationRepository(db)
        self.users = UserRepository(db)
        self.teams = TeamRepository(db)
        self.team_service = TeamService(db)
        self.notification_service = NotificationService(db)

    async def send_invitation(
        self,
        from_user_id: str,
        type: str,
        team_id: str,
        to_user_id: Optional[str] = None,
        role: Optional[str] = None,
        message: Optional[str] = None,
    ) -> Invitation:
        """
        Create a pending invite or join request and notify the addressee.

        For join requests the addressee is always the team leader.
        """
        is_join_request = type == INVITATION_TYPE_JOIN_REQUEST
        if type == INVITATION_TYPE_INVITE and not to_user_id:
            raise ValidationFailedError("to_user_id is required for invitations")

        team = await self.teams.get_by_id(team_id)
        if not team:
            raise NotFoundError("Team not found")
        if team.status != TEAM_STATUS_FORMING:
            raise ConflictError("Team is not accepting new members")

        if is_join_request:
            to_user_id = team.leader_id
        elif team.leader_id != from_user_id:
            raise PermissionDeniedError("Only team leader can send invitations")

        if to_user_id == from_user_id:
            raise ValidationFailedError("You cannot send an invitation to yourself")

        sender = await self.users.get_by_id(from_user_id)
        recipient = await self.users.get_by_id(to_user_id) if to_user_id else None
        if not sender or not recipient:
            raise NotFoundError("User not found")

        if not is_join_request and recipient.team_id:
            raise ConflictError("User is already in a team")
        if is_join_request and sender.team_id:
            raise ConflictError("You are already in a team")

        if await self.invitations.find_pending(from_user_id, team_id):
            raise ConflictError(_duplicate_message(type))

        from_user_name = sender.full_name or DEFAULT_USER_NAME
        to_user_name = recipient.full_name or DEFAULT_USER_NAME
        if not message:
            if is_join_request:
                message = f"{from_user_name} wants to join {team.name}"
            else:
                message = f"{from_user_name} invited you to join {team.name}"

        invitation = Invitation(
            type=type,
            from_user_id=from_user_id,
            from_user_name=from_user_name,
            to_user_id=to_user_id,
            to_user_name=to_user_name,
            team_id=team_id,
            team_name=team.name,
            role=role,
            message=message,
        )
        try:
            await self.invitations.create(invitation)
        except DuplicateKeyError:
            raise ConflictError(_duplicate_message(type))

        await self.notification_service.create_notification(
            to_user_id=to_user_id,
            type=NOTIFICATION_TYPE_JOIN_REQUEST if is_join_request else NOTIFICATION_TYPE_INVITE,
            message=message,
            from_user_id=from_user_id,
            from_user_name=from_user_name,
            team_id=team_id,
            team_name=team.name,
        )
        invitations_sent_total.labels(type=type).inc()
        logger.info(f"{type} {invitation.id} sent from {from_user_id} to {to_user_id} for team {team_id}")
        return invitation

    async def get_incoming_invitations(self, user_id: str) -> List[Invitation]:
        return await self.invitations.find_incoming(user_id)

    async def get_outgoing_invitations(self, user_id: str) -> List[Invitation]:
        return await self.invitations.find_outgoing(user_id)

    async def respond_to_invitation(
        self,
        invitation_id: str,
        responder_id: str,
        status: str,
        role: Optional[str] = None,
    ) -> Invitation:
        invitation = await self.invitations.get_by_id(invitation_id)
        if not invitation:
            raise NotFoundError("Invitation not found")
        if invitation.to_user_id != responder_id:
            raise PermissionDeniedError("Only the recipient can respond to this invitation")
        if invitation.status != INVITATION_STATUS_PENDING:
            raise ConflictError("Invitation has already been responded to")
        if status not in (INVITATION_STATUS_ACCEPTED, INVITATION_STATUS_REJECTED):
            raise ValidationFailedError("Status must be 'accepted' or 'rejected'")

        is_join_request = invitation.type == INVITATION_TYPE_JOIN_REQUEST
        joining_user_id = invitation.from_user_id if is_join_request else invitation.to_user_id
        joining_user_name = invitation.from_user_name if is_join_request else invitation.to_user_name

        responder = await self.users.get_by_id(responder_id)
        responder_name = responder.full_name if responder and responder.full_name else DEFAULT_USER_NAME

        if status == INVITATION_STATUS_ACCEPTED:
            joining_profile = await self.users.get_by_id(joining_user_id)
            if joining_profile and joining_profile.team_id:
                raise ConflictError("User is already in a team")

            team = await self.teams.get_by_id(invitation.team_id)
            if not team:
                raise NotFoundError("Team no longer exists")
            if team.status != TEAM_STATUS_FORMING:
                raise ConflictError("Team is not accepting new members")
            if team.is_full:
                raise ConflictError("Team is full")

            if not await self.invitations.resolve(invitation_id, status):
                raise ConflictError("Invitation has already been responded to")

            joining_role = (joining_profile.primary_role if joining_profile else None) or role or TEAM_ROLE_DEFAULT
            try:
                await self.team_service.add_team_member(invitation.team_id, joining_user_id, joining_role)
            except TeamUpError:
                # Membership failed after the claim, hand the invitation back
                await self.invitations.reopen(invitation_id, status)
                raise

            if is_join_request:
                text = f"Your request to join {invitation.team_name} was accepted!"
            else:
                text = f"{joining_user_name} accepted your invitation to join {invitation.team_name}"
            notification_type = NOTIFICATION_TYPE_ACCEPTED
        else:
            if not await self.invitations.resolve(invitation_id, status):
                raise ConflictError("Invitation has already been responded to")

            if is_join_request:
                text = f"Your request to join {invitation.team_name} was declined"
            else:
                text = f"{invitation.to_user_name} declined your invitation to join {invitation.team_name}"
            notification_type = NOTIFICATION_TYPE_REJECTED

        await self.notification_service.create_notification(
            to_user_id=invitation.from_user_id,
            type=notification_type,
            message=text,
            from_user_id=invitation.to_user_id,
            from_user_name=responder_name,
            team_id=invitation.team_id,
            team_name=invitation.team_name,
        )
        invitations_resolved_total.labels(type=invitation.type, status=status).inc()
        logger.info(f"Invitation {invitation_id} ({invitation.type}) {status} by {responder_id}")

        return await self.invitations.get_by_id(invitation_id)
