"""POST /accounts: create a user account."""

from __future__ import annotations

import logging
import re
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field, field_validator

from accounts_service.api.dependencies import get_hasher, get_user_repo
from accounts_service.api.errors import domain_error_response
from accounts_service.core.result import Err
from accounts_service.repos.user_repo import UserRepo
from accounts_service.services.hashing import Hasher
from accounts_service.services.users_service import register_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["accounts"])

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def check_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_RE.match(value):
        raise ValueError("Invalid email address")
    return value


class CreateAccountIn(BaseModel):
    name: str
    email: str
    # strength rules are not enforced at this layer
    password: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("email")
    @classmethod
    def _email_format(cls, value: str) -> str:
        return check_email(value)


@router.post(
    "/accounts",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses={400: {"description": "Invalid body or email already registered"}},
)
async def create_account(
    payload: CreateAccountIn,
    repo: Annotated[UserRepo, Depends(get_user_repo)],
    hasher: Annotated[Hasher, Depends(get_hasher)],
) -> Response:
    result = await register_user(
        repo,
        hasher,
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    if isinstance(result, Err):
        return domain_error_response(result.error)

    logger.info("Account created  user_id=%s", result.value.id)
    return Response(status_code=status.HTTP_201_CREATED)
