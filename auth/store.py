"""
UserStore — abstract account persistence used by ``CredentialService``.

Two implementations ship with the project:

  • ``InMemoryUserStore`` (below) — process-local, used by tests and
    ``USER_STORE=memory`` runs
  • ``database.helpers.SqlUserStore`` — SQLAlchemy, one per request session
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from auth.errors import DuplicateIdentifierError, NotFoundError
from utils.schemas import Account

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"email", "password", "admin"})


class UserStore(ABC):
    """Abstract base for account stores."""

    # ── Credential core ─────────────────────────────────────────────────

    @abstractmethod
    async def find_by_identifier(self, identifier: str) -> List[Account]:
        """Return every account whose email equals *identifier* (maybe none)."""
        ...

    @abstractmethod
    async def create(self, identifier: str, credential: str) -> Account:
        """
        Persist a new account and return it with its assigned id.

        Raises ``DuplicateIdentifierError`` if the store already holds
        *identifier*.
        """
        ...

    # ── Users CRUD ──────────────────────────────────────────────────────

    @abstractmethod
    async def get(self, user_id: int) -> Optional[Account]:
        ...

    @abstractmethod
    async def update(self, user_id: int, **attrs: Any) -> Account:
        """
        Apply *attrs* to an account.

        ``password`` must already be a credential string.  Raises
        ``NotFoundError`` or ``DuplicateIdentifierError``.
        """
        ...

    @abstractmethod
    async def remove(self, user_id: int) -> Account:
        ...


def check_update_fields(attrs: Dict[str, Any]) -> None:
    unknown = set(attrs) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")


class InMemoryUserStore(UserStore):
    """
    Dict-backed store.

    Writes run under one lock so the uniqueness check and the insert are
    a single step.
    """

    def __init__(self) -> None:
        self._accounts: Dict[int, Account] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._accounts)

    async def find_by_identifier(self, identifier: str) -> List[Account]:
        return [a for a in self._accounts.values() if a.email == identifier]

    async def get(self, user_id: int) -> Optional[Account]:
        return self._accounts.get(user_id)

    async def create(self, identifier: str, credential: str) -> Account:
        async with self._lock:
            if self._email_taken(identifier):
                raise DuplicateIdentifierError("Email in use", identifier)
            account = Account(id=self._next_id, email=identifier, password=credential)
            self._accounts[account.id] = account
            self._next_id += 1
        logger.info("Inserted user with id %s", account.id)
        return account

    async def update(self, user_id: int, **attrs: Any) -> Account:
        check_update_fields(attrs)
        async with self._lock:
            current = self._accounts.get(user_id)
            if current is None:
                raise NotFoundError("User not found")
            new_email = attrs.get("email")
            if new_email and new_email != current.email and self._email_taken(new_email):
                raise DuplicateIdentifierError("Email in use", new_email)
            updated = current.model_copy(update=attrs)
            self._accounts[user_id] = updated
        logger.info("Updated user with id %s", user_id)
        return updated

    async def remove(self, user_id: int) -> Account:
        async with self._lock:
            account = self._accounts.pop(user_id, None)
        if account is None:
            raise NotFoundError("User not found")
        logger.info("Removed user with id %s", user_id)
        return account

    def _email_taken(self, email: str) -> bool:
        return any(a.email == email for a in self._accounts.values())
