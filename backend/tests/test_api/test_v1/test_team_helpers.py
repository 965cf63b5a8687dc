"""Tests for team access helpers and platform stats."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException

from app.api.v1.helpers.teams import check_team_access
from app.models.team import Team, TeamMember


def _team():
    return Team(
        id="team-1",
        name="Hackers",
        leader_id="leader-1",
        members=[TeamMember(user_id="leader-1"), TeamMember(user_id="user-1")],
    )


def _patched_repo(team):
    mock_repo = MagicMock()
    mock_repo.get_by_id = AsyncMock(return_value=team)
    return patch("app.api.v1.helpers.teams.TeamRepository", return_value=mock_repo)


class TestCheckTeamAccess:
    def test_member_allowed(self, regular_user):
        with _patched_repo(_team()):
            team = asyncio.run(check_team_access("team-1", regular_user, MagicMock()))
        assert team.id == "team-1"

    def test_member_not_leader(self, regular_user):
        with _patched_repo(_team()):
            with pytest.raises(HTTPException) as exc_info:
                asyncio.run(check_team_access("team-1", regular_user, MagicMock(), leader_only=True))
        assert exc_info.value.status_code == 403

    def test_leader_allowed(self, team_leader):
        with _patched_repo(_team()):
            asyncio.run(check_team_access("team-1", team_leader, MagicMock(), leader_only=True))

    def test_missing_team(self, regular_user):
        with _patched_repo(None):
            with pytest.raises(HTTPException) as exc_info:
                asyncio.run(check_team_access("team-x", regular_user, MagicMock()))
        assert exc_info.value.status_code == 404

    def test_outsider(self, regular_user):
        team = _team()
        team.members = [TeamMember(user_id="leader-1")]
        with _patched_repo(team):
            with pytest.raises(HTTPException):
                asyncio.run(check_team_access("team-1", regular_user, MagicMock()))


class TestStats:
    def test_counts(self):
        from app.api.v1.endpoints.stats import read_stats

        users = MagicMock()
        users.count_available = AsyncMock(return_value=12)
        teams = MagicMock()
        teams.count_available = AsyncMock(return_value=3)

        with patch("app.services.stats.UserRepository", return_value=users):
            with patch("app.services.stats.TeamRepository", return_value=teams):
                result = asyncio.run(read_stats(db=MagicMock()))

        assert result == {"available_users": 12, "available_teams": 3}
