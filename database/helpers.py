"""
SQL-backed ``UserStore`` over an async SQLAlchemy session.

Uniqueness is enforced by the ``UNIQUE`` constraint on ``users.email``;
violations come back as ``DuplicateIdentifierError``.  Writes run inside a
savepoint so a failed insert leaves the request session usable.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import DuplicateIdentifierError, NotFoundError
from auth.store import UserStore, check_update_fields
from database.models import User
from utils.schemas import Account

logger = logging.getLogger(__name__)


def _to_account(user: User) -> Account:
    return Account.model_validate(user)


class SqlUserStore(UserStore):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_identifier(self, identifier: str) -> List[Account]:
        result = await self.session.execute(
            select(User).where(User.email == identifier)
        )
        return [_to_account(u) for u in result.scalars().all()]

    async def get(self, user_id: int) -> Optional[Account]:
        user = await self.session.get(User, user_id)
        return _to_account(user) if user is not None else None

    async def create(self, identifier: str, credential: str) -> Account:
        user = User(email=identifier, password=credential, admin=True)
        try:
            async with self.session.begin_nested():
                self.session.add(user)
                await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateIdentifierError("Email in use", identifier) from exc

        logger.info("Inserted user with id %s", user.id)
        return _to_account(user)

    async def update(self, user_id: int, **attrs: Any) -> Account:
        check_update_fields(attrs)
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        try:
            async with self.session.begin_nested():
                for key, value in attrs.items():
                    setattr(user, key, value)
                await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateIdentifierError("Email in use", attrs.get("email")) from exc

        logger.info("Updated user with id %s", user_id)
        return _to_account(user)

    async def remove(self, user_id: int) -> Account:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        account = _to_account(user)
        await self.session.delete(user)
        await self.session.flush()
        logger.info("Removed user with id %s", user_id)
        return account
