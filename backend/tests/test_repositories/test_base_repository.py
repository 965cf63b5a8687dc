"""Tests for the shared repository CRUD helpers."""

import asyncio

from pymongo import ReturnDocument

from app.repositories.posts import PostRepository
from tests.mocks.mongodb import create_mock_collection, create_mock_db


def _post_doc(**kwargs):
    doc = {
        "_id": "post-1",
        "author_id": "user-1",
        "author_name": "Alice Smith",
        "title": "Looking for a designer",
        "description": "Hackathon next week",
    }
    doc.update(kwargs)
    return doc


def _repo(**returns):
    return PostRepository(create_mock_db(posts=create_mock_collection(**returns)))


class TestUpdate:
    def test_returns_document_after_update(self):
        repo = _repo(find_one_and_update=_post_doc(title="Updated"))

        post = asyncio.run(repo.update("post-1", {"title": "Updated"}))

        assert post.title == "Updated"
        args, kwargs = repo.collection.find_one_and_update.call_args
        assert args == ({"_id": "post-1"}, {"$set": {"title": "Updated"}})
        assert kwargs["return_document"] == ReturnDocument.AFTER

    def test_missing_document(self):
        repo = _repo(find_one_and_update=None)

        assert asyncio.run(repo.update("post-1", {"title": "x"})) is None

    def test_empty_update_only_reads(self):
        repo = _repo(find_one=_post_doc())

        post = asyncio.run(repo.update("post-1", {}))

        assert post.id == "post-1"
        repo.collection.find_one_and_update.assert_not_called()


class TestFindMany:
    def test_sort_is_optional(self):
        repo = _repo(find=[_post_doc()])

        posts = asyncio.run(repo.find_many({"author_id": "user-1"}, limit=5))

        assert [p.id for p in posts] == ["post-1"]
        repo.collection.find.return_value.sort.assert_not_called()
        repo.collection.find.return_value.limit.assert_called_once_with(5)


class TestDelete:
    def test_reports_whether_deleted(self):
        assert asyncio.run(_repo(deleted_count=0).delete("post-1")) is False
        assert asyncio.run(_repo().delete("post-1")) is True
