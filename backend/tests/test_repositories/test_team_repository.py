"""Tests for TeamRepository capacity-guarded updates."""

import asyncio

from app.repositories.teams import TeamRepository
from tests.mocks.mongodb import create_mock_collection, create_mock_db


def _repo(**returns):
    db = create_mock_db(teams=create_mock_collection(**returns))
    return TeamRepository(db)


class TestAddMember:
    def test_guards_capacity_and_duplicates(self):
        repo = _repo()

        assert asyncio.run(repo.add_member("team-1", {"user_id": "user-1", "role": "Member"})) is True

        query, update = repo.collection.update_one.call_args[0]
        assert query["_id"] == "team-1"
        assert query["status"] == "forming"
        assert query["members.user_id"] == {"$ne": "user-1"}
        assert query["$expr"] == {"$lt": [{"$size": "$members"}, "$max_members"]}
        assert update["$push"]["members"]["user_id"] == "user-1"

    def test_full_team_not_modified(self):
        repo = _repo(modified_count=0)

        assert asyncio.run(repo.add_member("team-1", {"user_id": "user-1"})) is False


class TestAvailable:
    def test_forming_with_room(self):
        repo = _repo(count_documents=3)

        assert asyncio.run(repo.count_available()) == 3

        query = repo.collection.count_documents.call_args[0][0]
        assert query["status"] == "forming"
        assert "$expr" in query

    def test_newest_first(self):
        repo = _repo(find=[])

        asyncio.run(repo.find_available())
        repo.collection.find.return_value.sort.assert_called_once_with("created_at", -1)


class TestRemoveMember:
    def test_pulls_member(self):
        repo = _repo()

        asyncio.run(repo.remove_member("team-1", "user-1"))

        update = repo.collection.update_one.call_args[0][1]
        assert update["$pull"] == {"members": {"user_id": "user-1"}}
