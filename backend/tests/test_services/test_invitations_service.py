"""Tests for InvitationService: sending, duplicates and responding."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from app.core.constants import (
    NOTIFICATION_TYPE_ACCEPTED,
    NOTIFICATION_TYPE_INVITE,
    NOTIFICATION_TYPE_JOIN_REQUEST,
    NOTIFICATION_TYPE_REJECTED,
)
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from app.models.invitation import Invitation
from app.services.invitations import InvitationService
from app.services.teams import TeamService
from tests.mocks.models import make_team, make_user


def _service(users=None, team=None):
    """Service with repositories resolving the given users by id and one team."""
    users = {u.id: u for u in (users or [])}
    service = InvitationService(MagicMock())
    service.invitations = MagicMock()
    service.invitations.find_pending = AsyncMock(return_value=None)
    service.invitations.create = AsyncMock()
    service.users = MagicMock()
    service.users.get_by_id = AsyncMock(side_effect=lambda uid: users.get(uid))
    service.teams = MagicMock()
    service.teams.get_by_id = AsyncMock(return_value=team)
    service.team_service = MagicMock()
    service.team_service.add_team_member = AsyncMock()
    service.notification_service = MagicMock()
    service.notification_service.create_notification = AsyncMock()
    return service


def _team_service(users, team):
    """Real TeamService over mocked repositories."""
    users = {u.id: u for u in users}
    team_service = TeamService(MagicMock())
    team_service.users = MagicMock()
    team_service.users.get_by_id = AsyncMock(side_effect=lambda uid: users.get(uid))
    team_service.users.claim_team = AsyncMock(return_value=True)
    team_service.users.release_team = AsyncMock()
    team_service.teams = MagicMock()
    team_service.teams.get_by_id = AsyncMock(return_value=team)
    team_service.teams.add_member = AsyncMock(return_value=True)
    team_service.feed = MagicMock()
    team_service.feed.create_feed_post = AsyncMock()
    return team_service


def _invitation(type="invite", status="pending", **kwargs):
    defaults = dict(
        id="inv-1",
        type=type,
        status=status,
        from_user_id="leader-1",
        from_user_name="Lea Leader",
        to_user_id="user-1",
        to_user_name="Alice Smith",
        team_id="team-1",
        team_name="Hackers",
    )
    if type == "join_request":
        defaults.update(
            from_user_id="user-1",
            from_user_name="Alice Smith",
            to_user_id="leader-1",
            to_user_name="Lea Leader",
        )
    defaults.update(kwargs)
    return Invitation(**defaults)


class TestSendInvite:
    def test_leader_invites_free_user(self, alice, leader, team):
        service = _service([alice, leader], team)

        invitation = asyncio.run(
            service.send_invitation("leader-1", "invite", "team-1", to_user_id=alice.id, role="Backend Developer")
        )

        assert invitation.status == "pending"
        assert invitation.to_user_id == alice.id
        assert invitation.team_name == "Hackers"
        assert invitation.message == "Lea Leader invited you to join Hackers"
        kwargs = service.notification_service.create_notification.call_args.kwargs
        assert kwargs["to_user_id"] == alice.id
        assert kwargs["type"] == NOTIFICATION_TYPE_INVITE

    def test_custom_message_kept(self, alice, leader, team):
        service = _service([alice, leader], team)

        invitation = asyncio.run(
            service.send_invitation("leader-1", "invite", "team-1", to_user_id=alice.id, message="Join us!")
        )
        assert invitation.message == "Join us!"

    def test_non_leader_cannot_invite(self, alice, team):
        bob = make_user(id="bob", username="bob")
        service = _service([alice, bob], team)

        with pytest.raises(PermissionDeniedError, match="Only team leader can send invitations"):
            asyncio.run(service.send_invitation("bob", "invite", "team-1", to_user_id=alice.id))

    def test_recipient_already_in_team(self, leader, team):
        taken = make_user(team_id="team-2")
        service = _service([taken, leader], team)

        with pytest.raises(ConflictError, match="User is already in a team"):
            asyncio.run(service.send_invitation("leader-1", "invite", "team-1", to_user_id=taken.id))

    def test_self_invite_rejected(self, leader, team):
        service = _service([leader], team)

        with pytest.raises(ValidationFailedError):
            asyncio.run(service.send_invitation("leader-1", "invite", "team-1", to_user_id="leader-1"))

    def test_invite_requires_recipient(self, leader, team):
        service = _service([leader], team)

        with pytest.raises(ValidationFailedError, match="to_user_id is required"):
            asyncio.run(service.send_invitation("leader-1", "invite", "team-1"))
        service.invitations.create.assert_not_called()

    def test_closed_team_rejects_invites(self, alice, leader):
        service = _service([alice, leader], make_team(status="closed"))

        with pytest.raises(ConflictError, match="not accepting new members"):
            asyncio.run(service.send_invitation("leader-1", "invite", "team-1", to_user_id=alice.id))

    def test_unknown_team(self, alice, leader):
        service = _service([alice, leader], None)

        with pytest.raises(NotFoundError, match="Team not found"):
            asyncio.run(service.send_invitation("leader-1", "invite", "team-x", to_user_id=alice.id))

    def test_duplicate_pending_invitation(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.find_pending = AsyncMock(return_value=_invitation())

        with pytest.raises(ConflictError, match="Invitation already sent"):
            asyncio.run(service.send_invitation("leader-1", "invite", "team-1", to_user_id=alice.id))
        service.invitations.create.assert_not_called()

    def test_duplicate_key_race_is_conflict(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.create = AsyncMock(side_effect=DuplicateKeyError("dup"))

        with pytest.raises(ConflictError, match="Invitation already sent"):
            asyncio.run(service.send_invitation("leader-1", "invite", "team-1", to_user_id=alice.id))
        service.notification_service.create_notification.assert_not_called()


class TestSendJoinRequest:
    def test_addressed_to_leader(self, alice, leader, team):
        service = _service([alice, leader], team)

        invitation = asyncio.run(service.send_invitation(alice.id, "join_request", "team-1"))

        assert invitation.to_user_id == "leader-1"
        assert invitation.message == "Alice Smith wants to join Hackers"
        kwargs = service.notification_service.create_notification.call_args.kwargs
        assert kwargs["to_user_id"] == "leader-1"
        assert kwargs["type"] == NOTIFICATION_TYPE_JOIN_REQUEST

    def test_given_recipient_is_overridden(self, alice, leader, team):
        service = _service([alice, leader], team)

        invitation = asyncio.run(service.send_invitation(alice.id, "join_request", "team-1", to_user_id="someone"))
        assert invitation.to_user_id == "leader-1"

    def test_closed_team_rejects_join_requests(self, alice, leader):
        service = _service([alice, leader], make_team(status="closed"))

        with pytest.raises(ConflictError, match="not accepting new members"):
            asyncio.run(service.send_invitation(alice.id, "join_request", "team-1"))
        service.notification_service.create_notification.assert_not_called()

    def test_requester_already_in_team(self, leader, team):
        member = make_user(team_id="team-2")
        service = _service([member, leader], team)

        with pytest.raises(ConflictError, match="You are already in a team"):
            asyncio.run(service.send_invitation(member.id, "join_request", "team-1"))

    def test_duplicate_join_request(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.find_pending = AsyncMock(return_value=_invitation("join_request"))

        with pytest.raises(ConflictError, match="Join request already sent"):
            asyncio.run(service.send_invitation(alice.id, "join_request", "team-1"))


class TestRespond:
    def test_accept_invite_adds_member_with_primary_role(self, alice, leader, team):
        service = _service([alice, leader], team)
        pending = _invitation()
        accepted = _invitation(status="accepted")
        service.invitations.get_by_id = AsyncMock(side_effect=[pending, accepted])
        service.invitations.resolve = AsyncMock(return_value=True)

        result = asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))

        assert result.status == "accepted"
        service.team_service.add_team_member.assert_awaited_once_with("team-1", alice.id, "Backend Developer")
        kwargs = service.notification_service.create_notification.call_args.kwargs
        assert kwargs["to_user_id"] == "leader-1"
        assert kwargs["type"] == NOTIFICATION_TYPE_ACCEPTED
        assert kwargs["message"] == "Alice Smith accepted your invitation to join Hackers"

    def test_accept_join_request_adds_requester(self, leader, team):
        requester = make_user()
        service = _service([requester, leader], team)
        service.invitations.get_by_id = AsyncMock(
            side_effect=[_invitation("join_request"), _invitation("join_request", status="accepted")]
        )
        service.invitations.resolve = AsyncMock(return_value=True)

        asyncio.run(service.respond_to_invitation("inv-1", "leader-1", "accepted", role="Designer"))

        service.team_service.add_team_member.assert_awaited_once_with("team-1", requester.id, "Designer")
        kwargs = service.notification_service.create_notification.call_args.kwargs
        assert kwargs["to_user_id"] == requester.id
        assert kwargs["message"] == "Your request to join Hackers was accepted!"

    def test_default_role_is_member(self, leader, team):
        requester = make_user()
        service = _service([requester, leader], team)
        service.invitations.get_by_id = AsyncMock(
            side_effect=[_invitation("join_request"), _invitation("join_request", status="accepted")]
        )
        service.invitations.resolve = AsyncMock(return_value=True)

        asyncio.run(service.respond_to_invitation("inv-1", "leader-1", "accepted"))
        assert service.team_service.add_team_member.call_args[0][2] == "Member"

    def test_reject_does_not_touch_team(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.get_by_id = AsyncMock(side_effect=[_invitation(), _invitation(status="rejected")])
        service.invitations.resolve = AsyncMock(return_value=True)

        asyncio.run(service.respond_to_invitation("inv-1", alice.id, "rejected"))

        service.team_service.add_team_member.assert_not_called()
        kwargs = service.notification_service.create_notification.call_args.kwargs
        assert kwargs["type"] == NOTIFICATION_TYPE_REJECTED
        assert kwargs["message"] == "Alice Smith declined your invitation to join Hackers"

    def test_only_addressee_can_respond(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.get_by_id = AsyncMock(return_value=_invitation())

        with pytest.raises(PermissionDeniedError):
            asyncio.run(service.respond_to_invitation("inv-1", "leader-1", "accepted"))

    def test_already_resolved(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.get_by_id = AsyncMock(return_value=_invitation(status="rejected"))

        with pytest.raises(ConflictError, match="already been responded to"):
            asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))

    def test_accept_into_full_team(self, alice, leader, full_team):
        service = _service([alice, leader], full_team)
        service.invitations.get_by_id = AsyncMock(return_value=_invitation())

        with pytest.raises(ConflictError, match="Team is full"):
            asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))
        service.team_service.add_team_member.assert_not_called()

    def test_accept_when_team_gone(self, alice, leader):
        service = _service([alice, leader], None)
        service.invitations.get_by_id = AsyncMock(return_value=_invitation())

        with pytest.raises(NotFoundError):
            asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))

    def test_accept_when_already_in_team(self, leader, team):
        taken = make_user(team_id="team-2")
        service = _service([taken, leader], team)
        service.invitations.get_by_id = AsyncMock(return_value=_invitation())

        with pytest.raises(ConflictError, match="User is already in a team"):
            asyncio.run(service.respond_to_invitation("inv-1", taken.id, "accepted"))

    def test_lost_resolve_race_leaves_team_untouched(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.get_by_id = AsyncMock(return_value=_invitation())
        service.invitations.resolve = AsyncMock(return_value=False)

        with pytest.raises(ConflictError, match="already been responded to"):
            asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))
        service.team_service.add_team_member.assert_not_called()
        service.notification_service.create_notification.assert_not_called()

    def test_lost_resolve_race_writes_no_feed_post(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.get_by_id = AsyncMock(return_value=_invitation())
        service.invitations.resolve = AsyncMock(return_value=False)
        service.team_service = _team_service([alice, leader], team)

        with pytest.raises(ConflictError):
            asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))
        assert service.team_service.feed.create_feed_post.await_count == 0
        service.team_service.users.claim_team.assert_not_called()

    def test_failed_join_reopens_invitation(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.get_by_id = AsyncMock(return_value=_invitation())
        service.invitations.resolve = AsyncMock(return_value=True)
        service.invitations.reopen = AsyncMock(return_value=True)
        service.team_service = _team_service([alice, leader], team)
        service.team_service.teams.add_member = AsyncMock(return_value=False)

        with pytest.raises(ConflictError, match="Team is full"):
            asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))

        service.invitations.reopen.assert_awaited_once_with("inv-1", "accepted")
        service.team_service.users.release_team.assert_awaited_once_with(alice.id)
        service.team_service.feed.create_feed_post.assert_not_called()
        service.notification_service.create_notification.assert_not_called()

    def test_accept_into_closed_team(self, alice, leader):
        service = _service([alice, leader], make_team(status="closed"))
        service.invitations.get_by_id = AsyncMock(return_value=_invitation())
        service.invitations.resolve = AsyncMock(return_value=True)

        with pytest.raises(ConflictError, match="not accepting new members"):
            asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))
        service.invitations.resolve.assert_not_called()

    def test_resolved_before_member_added(self, alice, leader, team):
        service = _service([alice, leader], team)
        service.invitations.get_by_id = AsyncMock(side_effect=[_invitation(), _invitation(status="accepted")])
        calls = []
        service.invitations.resolve = AsyncMock(side_effect=lambda *a: calls.append("resolve") or True)
        service.team_service.add_team_member = AsyncMock(side_effect=lambda *a: calls.append("add"))

        asyncio.run(service.respond_to_invitation("inv-1", alice.id, "accepted"))
        assert calls == ["resolve", "add"]

    def test_missing_invitation(self):
        service = _service()
        service.invitations.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match="Invitation not found"):
            asyncio.run(service.respond_to_invitation("nope", "user-1", "accepted"))
