"""POST /sessions: trade email + password for a bearer token."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from accounts_service.api.accounts import check_email
from accounts_service.api.dependencies import (
    get_hasher,
    get_token_issuer,
    get_user_repo,
)
from accounts_service.api.errors import domain_error_response
from accounts_service.core.result import Err
from accounts_service.repos.user_repo import UserRepo
from accounts_service.services.auth_service import authenticate_user
from accounts_service.services.hashing import Hasher
from accounts_service.services.token_service import TokenIssuer

router = APIRouter(tags=["sessions"])


class SessionIn(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email_format(cls, value: str) -> str:
        return check_email(value)


class SessionOut(BaseModel):
    access_token: str


@router.post(
    "/sessions",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid body or invalid credentials"}},
)
async def create_session(
    payload: SessionIn,
    repo: Annotated[UserRepo, Depends(get_user_repo)],
    hasher: Annotated[Hasher, Depends(get_hasher)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> SessionOut | JSONResponse:
    result = await authenticate_user(
        repo,
        hasher,
        issuer,
        email=payload.email,
        password=payload.password,
    )
    if isinstance(result, Err):
        return domain_error_response(result.error)

    return SessionOut(access_token=result.value.access_token)
