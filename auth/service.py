"""
CredentialService — signup and signin over a ``UserStore``.
"""

from __future__ import annotations

import logging
from typing import Optional

from auth.errors import (
    AmbiguousIdentifierError,
    DuplicateIdentifierError,
    InvalidCredentialsError,
    NotFoundError,
)
from auth.password import PasswordHasher, get_password_hasher
from auth.store import UserStore
from utils.schemas import Account

logger = logging.getLogger(__name__)


class CredentialService:
    def __init__(self, store: UserStore, hasher: Optional[PasswordHasher] = None) -> None:
        self.store = store
        self.hasher = hasher or get_password_hasher()

    async def signup(self, identifier: str, password: str) -> Account:
        """
        Create an account with a salted, hashed password.

        Raises ``DuplicateIdentifierError`` if the email is already
        registered, whether found up front or rejected by the store.
        """
        existing = await self.store.find_by_identifier(identifier)
        if existing:
            raise DuplicateIdentifierError("Email in use", identifier)

        credential = self.hasher.hash_password(password)
        account = await self.store.create(identifier, credential)
        logger.info("Signed up user %s", account.id)
        return account

    async def signin(self, identifier: str, password: str) -> Account:
        """
        Return the account for *identifier* if *password* matches.

        Raises ``NotFoundError`` when nothing matches and
        ``InvalidCredentialsError`` on a wrong password.  Several matches
        raise ``AmbiguousIdentifierError``, itself an
        ``InvalidCredentialsError``.
        """
        matches = await self.store.find_by_identifier(identifier)
        if not matches:
            raise NotFoundError("User not found", identifier)
        if len(matches) > 1:
            logger.error("Identifier matches %d accounts", len(matches))
            raise AmbiguousIdentifierError("Bad password", identifier)

        account = matches[0]
        try:
            matched = self.hasher.check_password(password, account.password)
        except ValueError:
            logger.warning("Unverifiable credential for user %s", account.id)
            raise InvalidCredentialsError("Bad password", identifier)

        if not matched:
            raise InvalidCredentialsError("Bad password", identifier)

        logger.info("Signed in user %s", account.id)
        return account
