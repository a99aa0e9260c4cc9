"""
Auth API routes — signup, signin.

Route prefix: /auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from auth.dependencies import get_credential_service
from auth.service import CredentialService
from utils.schemas import CreateUserRequest, SigninRequest, UserDto
from utils.serialize import shape

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=UserDto, status_code=201)
async def signup(
    req: CreateUserRequest,
    service: CredentialService = Depends(get_credential_service),
) -> Dict[str, Any]:
    """Register a new user."""
    account = await service.signup(req.email, req.password)
    return shape(UserDto, account)


@router.post("/signin", response_model=UserDto)
async def signin(
    req: SigninRequest,
    service: CredentialService = Depends(get_credential_service),
) -> Dict[str, Any]:
    """Sign in with email + password."""
    account = await service.signin(req.email, req.password)
    return shape(UserDto, account)
