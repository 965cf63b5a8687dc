"""
Shared test fixtures and configuration.

Environment variables are set BEFORE any app imports to prevent
accidental connections to real databases.
"""

import os
import sys

# Ensure the backend app is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Override settings before any app code imports the settings singleton
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests"
os.environ["ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "15"
os.environ["REFRESH_TOKEN_EXPIRE_DAYS"] = "1"
os.environ["MONGODB_URL"] = "mongodb://localhost:27017"
os.environ["DATABASE_NAME"] = "test_teamup"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"

import pytest  # noqa: E402

from app.models.team import TeamMember  # noqa: E402
from app.models.user import Skill  # noqa: E402
from tests.mocks.models import make_team, make_user  # noqa: E402


@pytest.fixture
def alice():
    """User without a team."""
    return make_user(
        primary_role="Backend Developer",
        skills=[Skill(name="Python", level="Advanced"), Skill(name="Docker")],
    )


@pytest.fixture
def leader():
    """Leader of team-1."""
    return make_user(
        id="leader-1",
        username="lea",
        full_name="Lea Leader",
        team_id="team-1",
        is_team_leader=True,
    )


@pytest.fixture
def team():
    """Forming team-1 led by leader-1 with one of four slots taken."""
    return make_team()


@pytest.fixture
def full_team():
    return make_team(
        members=[
            TeamMember(user_id="leader-1", role="Team Leader"),
            TeamMember(user_id="m-2"),
        ],
        max_members=2,
    )
