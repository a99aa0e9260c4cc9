"""
User management routes.

Route prefix: /auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from auth.dependencies import get_hasher, get_user_store
from auth.errors import NotFoundError
from auth.password import PasswordHasher
from auth.store import UserStore
from utils.schemas import UpdateUserRequest, UserDto
from utils.serialize import shape

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.get("/users", response_model=List[UserDto])
async def find_users(
    email: str = Query(..., min_length=1),
    store: UserStore = Depends(get_user_store),
) -> List[Dict[str, Any]]:
    return shape(UserDto, await store.find_by_identifier(email))


@router.get("/users/{user_id}", response_model=UserDto)
async def get_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
) -> Dict[str, Any]:
    account = await store.get(user_id)
    if account is None:
        raise NotFoundError("User not found")
    return shape(UserDto, account)


@router.patch("/users/{user_id}", response_model=UserDto)
async def update_user(
    user_id: int,
    req: UpdateUserRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
) -> Dict[str, Any]:
    """Partial update; a new password is hashed before it is stored."""
    attrs = req.model_dump(exclude_none=True)
    if "password" in attrs:
        attrs["password"] = hasher.hash_password(attrs["password"])
    account = await store.update(user_id, **attrs)
    return shape(UserDto, account)


@router.delete("/users/{user_id}", response_model=UserDto)
async def remove_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
) -> Dict[str, Any]:
    return shape(UserDto, await store.remove(user_id))
