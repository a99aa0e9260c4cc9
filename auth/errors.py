"""
Account error kinds.

These are business-rule violations, raised straight to the caller.  The
HTTP layer maps them to status codes in ``api.middleware``.
"""

from __future__ import annotations


class AccountError(Exception):
    """Base class for all account errors."""

    def __init__(self, message: str, identifier: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.identifier = identifier


class DuplicateIdentifierError(AccountError):
    """Signup (or an email change) hit an identifier already in use."""


class NotFoundError(AccountError):
    """No account matches the identifier or id."""


class InvalidCredentialsError(AccountError):
    """The password does not match the stored credential."""


class AmbiguousIdentifierError(InvalidCredentialsError):
    """More than one account shares an identifier that should be unique."""
