"""
Tests for the in-memory and SQL user stores.
"""

import asyncio
import logging

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import IntegrityError

from auth.errors import DuplicateIdentifierError, NotFoundError
from auth.store import InMemoryUserStore
from database.helpers import SqlUserStore
from database.models import User


class TestInMemoryUserStore:
    @pytest.mark.asyncio
    async def test_create_assigns_increasing_ids(self):
        store = InMemoryUserStore()
        a = await store.create("a@x.com", "s.d")
        b = await store.create("b@x.com", "s.d")
        assert (a.id, b.id) == (1, 2)
        assert a.admin is True

    @pytest.mark.asyncio
    async def test_find_by_identifier(self):
        store = InMemoryUserStore()
        await store.create("a@x.com", "s.d")
        assert [a.email for a in await store.find_by_identifier("a@x.com")] == ["a@x.com"]
        assert await store.find_by_identifier("other@x.com") == []

    @pytest.mark.asyncio
    async def test_create_rejects_duplicate(self):
        store = InMemoryUserStore()
        await store.create("a@x.com", "s.d")
        with pytest.raises(DuplicateIdentifierError):
            await store.create("a@x.com", "s.e")
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_concurrent_creates_keep_email_unique(self):
        store = InMemoryUserStore()
        results = await asyncio.gather(
            *(store.create("same@x.com", "s.d") for _ in range(5)),
            return_exceptions=True,
        )
        assert sum(isinstance(r, DuplicateIdentifierError) for r in results) == 4
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_update(self):
        store = InMemoryUserStore()
        account = await store.create("a@x.com", "s.d")
        updated = await store.update(account.id, email="new@x.com", admin=False)
        assert updated.email == "new@x.com"
        assert updated.admin is False
        assert (await store.get(account.id)).email == "new@x.com"

    @pytest.mark.asyncio
    async def test_update_errors(self):
        store = InMemoryUserStore()
        a = await store.create("a@x.com", "s.d")
        await store.create("b@x.com", "s.d")
        with pytest.raises(NotFoundError):
            await store.update(99, admin=False)
        with pytest.raises(DuplicateIdentifierError):
            await store.update(a.id, email="b@x.com")
        with pytest.raises(ValueError, match="id"):
            await store.update(a.id, id=5)

    @pytest.mark.asyncio
    async def test_remove(self):
        store = InMemoryUserStore()
        account = await store.create("a@x.com", "s.d")
        removed = await store.remove(account.id)
        assert removed.id == account.id
        assert await store.get(account.id) is None
        with pytest.raises(NotFoundError):
            await store.remove(account.id)

    @pytest.mark.asyncio
    async def test_lifecycle_is_logged(self, caplog):
        store = InMemoryUserStore()
        with caplog.at_level(logging.INFO, logger="auth.store"):
            account = await store.create("a@x.com", "salt123.digest456")
            await store.update(account.id, admin=False)
            await store.remove(account.id)
        assert "Inserted user with id 1" in caplog.text
        assert "Updated user with id 1" in caplog.text
        assert "Removed user with id 1" in caplog.text
        assert "digest456" not in caplog.text


# ── SQL store ──────────────────────────────────────────────────────────────────


def _mock_session() -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.delete = AsyncMock()

    nested = MagicMock()
    nested.__aenter__ = AsyncMock(return_value=None)
    nested.__aexit__ = AsyncMock(return_value=False)
    session.begin_nested = MagicMock(return_value=nested)
    return session


def _user(user_id=1, email="a@x.com") -> User:
    return User(id=user_id, email=email, password="s.d", admin=True)


class TestSqlUserStore:
    @pytest.mark.asyncio
    async def test_find_by_identifier_maps_rows(self):
        session = _mock_session()
        result = MagicMock()
        result.scalars.return_value.all.return_value = [_user()]
        session.execute.return_value = result

        accounts = await SqlUserStore(session).find_by_identifier("a@x.com")

        assert [(a.id, a.email) for a in accounts] == [(1, "a@x.com")]
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_flushes_and_returns_account(self):
        session = _mock_session()

        def _assign_id():
            session.add.call_args.args[0].id = 7

        session.flush.side_effect = _assign_id

        account = await SqlUserStore(session).create("a@x.com", "salt.digest")

        assert account.id == 7
        assert account.password == "salt.digest"
        session.add.assert_called_once()
        session.begin_nested.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_integrity_error_becomes_duplicate(self):
        session = _mock_session()
        session.flush.side_effect = IntegrityError("INSERT", {}, Exception("unique"))

        with pytest.raises(DuplicateIdentifierError):
            await SqlUserStore(session).create("a@x.com", "salt.digest")

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self):
        assert await SqlUserStore(_mock_session()).get(3) is None

    @pytest.mark.asyncio
    async def test_update_sets_attributes(self):
        session = _mock_session()
        user = _user()
        session.get.return_value = user

        account = await SqlUserStore(session).update(1, admin=False)

        assert account.admin is False
        assert user.admin is False
        session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_missing_raises(self):
        with pytest.raises(NotFoundError):
            await SqlUserStore(_mock_session()).update(1, admin=False)

    @pytest.mark.asyncio
    async def test_remove_deletes_row(self):
        session = _mock_session()
        user = _user()
        session.get.return_value = user

        account = await SqlUserStore(session).remove(1)

        assert account.email == "a@x.com"
        session.delete.assert_awaited_once_with(user)
