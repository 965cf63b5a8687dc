"""Shared fixtures for API endpoint tests."""

import pytest

from tests.mocks.models import make_user


@pytest.fixture
def regular_user():
    """Active user without a team."""
    return make_user(id="user-1", username="user", full_name="Regular User")


@pytest.fixture
def team_leader():
    return make_user(
        id="leader-1",
        username="leader",
        full_name="Team Leader",
        team_id="team-1",
        is_team_leader=True,
    )
