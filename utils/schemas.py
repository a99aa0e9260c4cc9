"""
Pydantic schemas for accounts and the auth API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ═══════════════════════════════════════════════════════════════════════════════
# Domain
# ═══════════════════════════════════════════════════════════════════════════════


class Account(BaseModel):
    """
    A stored user account.

    ``password`` holds the ``salt.digest`` credential string, never the
    plaintext.  Use ``utils.serialize.shape`` with ``UserDto`` before
    returning an account to a client.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    password: str
    admin: bool = True


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


def _require_encodable(value: Optional[str]) -> Optional[str]:
    """Reject text that cannot be UTF-8 encoded, e.g. lone surrogates."""
    if value is not None:
        try:
            value.encode()
        except UnicodeEncodeError:
            raise ValueError("must be valid unicode text") from None
    return value


class CreateUserRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    check_encodable = field_validator("email", "password")(_require_encodable)


class SigninRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    check_encodable = field_validator("email", "password")(_require_encodable)


class UpdateUserRequest(BaseModel):
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = Field(None, min_length=1, max_length=128)
    admin: Optional[bool] = None

    check_encodable = field_validator("email", "password")(_require_encodable)


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class UserDto(BaseModel):
    """Public view of an account."""

    id: int
    email: str
