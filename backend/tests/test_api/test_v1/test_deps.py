"""Tests for the current-user dependency."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from app.api.deps import get_current_active_user, get_current_user
from app.core.security import create_access_token, create_refresh_token
from tests.mocks.mongodb import create_mock_collection, create_mock_db


def _db(user_doc):
    return create_mock_db(users=create_mock_collection(find_one=user_doc))


def _user_doc(**kwargs):
    doc = {
        "_id": "user-1",
        "username": "alice",
        "email": "alice@test.com",
        "hashed_password": "hashed",
    }
    doc.update(kwargs)
    return doc


class TestGetCurrentUser:
    def test_valid_access_token(self):
        user = asyncio.run(get_current_user(db=_db(_user_doc()), token=create_access_token("user-1")))

        assert user.id == "user-1"

    def test_refresh_token_not_accepted(self):
        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(get_current_user(db=_db(_user_doc()), token=create_refresh_token("user-1")))
        assert exc_info.value.status_code == 401

    def test_unknown_user(self):
        with pytest.raises(HTTPException):
            asyncio.run(get_current_user(db=_db(None), token=create_access_token("user-1")))

    def test_token_issued_before_logout(self):
        doc = _user_doc(last_logout_at=datetime.now(timezone.utc) + timedelta(minutes=1))

        with pytest.raises(HTTPException):
            asyncio.run(get_current_user(db=_db(doc), token=create_access_token("user-1")))

    def test_token_issued_after_logout(self):
        doc = _user_doc(last_logout_at=datetime.now(timezone.utc) - timedelta(hours=1))

        user = asyncio.run(get_current_user(db=_db(doc), token=create_access_token("user-1")))
        assert user.id == "user-1"

    def test_garbage_token(self):
        with pytest.raises(HTTPException):
            asyncio.run(get_current_user(db=_db(_user_doc()), token="garbage"))


class TestGetCurrentActiveUser:
    def test_inactive_rejected(self):
        user = asyncio.run(
            get_current_user(db=_db(_user_doc(is_active=False)), token=create_access_token("user-1"))
        )

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(get_current_active_user(current_user=user))
        assert exc_info.value.status_code == 400
