"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_user_store`` and ``get_credential_service``.
``main.create_app`` swaps ``get_user_store`` for ``get_memory_store`` when
``USER_STORE=memory``; tests do the same through ``dependency_overrides``.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import PasswordHasher, get_password_hasher
from auth.service import CredentialService
from auth.store import InMemoryUserStore, UserStore
from database.helpers import SqlUserStore
from database.session import get_db_session

_memory_store: InMemoryUserStore | None = None


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


async def get_user_store(session: AsyncSession = Depends(db_session)) -> UserStore:
    """SQL store bound to the request's session."""
    return SqlUserStore(session)


def get_memory_store() -> UserStore:
    """Process-wide in-memory store."""
    global _memory_store
    if _memory_store is None:
        _memory_store = InMemoryUserStore()
    return _memory_store


def get_hasher() -> PasswordHasher:
    return get_password_hasher()


async def get_credential_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
) -> CredentialService:
    return CredentialService(store, hasher)
