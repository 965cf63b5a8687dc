"""Tests for profile and discovery endpoints."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

MODULE = "app.api.v1.endpoints.users"


class TestReadUsers:
    def test_without_filters_lists_everyone_else(self, regular_user):
        from app.api.v1.endpoints.users import read_users

        mock_service = MagicMock()
        mock_service.get_all_users = AsyncMock(return_value=[])
        mock_service.search_users = AsyncMock()

        with patch(f"{MODULE}.ProfileService", return_value=mock_service):
            asyncio.run(read_users(q=None, role=None, current_user=regular_user, db=MagicMock()))

        mock_service.get_all_users.assert_awaited_once_with(exclude_user_id="user-1")
        mock_service.search_users.assert_not_called()

    def test_search(self, regular_user):
        from app.api.v1.endpoints.users import read_users

        mock_service = MagicMock()
        mock_service.search_users = AsyncMock(return_value=[])

        with patch(f"{MODULE}.ProfileService", return_value=mock_service):
            asyncio.run(read_users(q="react", role=None, current_user=regular_user, db=MagicMock()))

        mock_service.search_users.assert_awaited_once_with(text="react", role=None, exclude_user_id="user-1")


class TestAvailableUsers:
    def test_filtered_by_role(self, regular_user):
        from app.api.v1.endpoints.users import read_available_users

        mock_service = MagicMock()
        mock_service.get_available_users_by_role = AsyncMock(return_value=[])

        with patch(f"{MODULE}.ProfileService", return_value=mock_service):
            asyncio.run(read_available_users(role="Designer", current_user=regular_user, db=MagicMock()))

        mock_service.get_available_users_by_role.assert_awaited_once_with("Designer", exclude_user_id="user-1")


class TestUsernameRoutes:
    def test_availability_excludes_self(self, regular_user):
        from app.api.v1.endpoints.users import check_username_available

        mock_service = MagicMock()
        mock_service.is_username_available = AsyncMock(return_value=True)

        with patch(f"{MODULE}.ProfileService", return_value=mock_service):
            result = asyncio.run(
                check_username_available(username="User", current_user=regular_user, db=MagicMock())
            )

        assert result == {"username": "user", "available": True}
        mock_service.is_username_available.assert_awaited_once_with("User", exclude_user_id="user-1")


class TestDeleteMe:
    def test_deletes_account(self, regular_user):
        from app.api.v1.endpoints.users import delete_user_me

        mock_service = MagicMock()
        mock_service.delete_user_completely = AsyncMock(return_value=True)

        with patch(f"{MODULE}.ProfileService", return_value=mock_service):
            response = asyncio.run(delete_user_me(current_user=regular_user, db=MagicMock()))

        assert response.status_code == 204
        mock_service.delete_user_completely.assert_awaited_once_with("user-1")
