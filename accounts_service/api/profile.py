"""GET /me: profile of the user named by the bearer token."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from accounts_service.api.dependencies import get_user_repo, require_user
from accounts_service.models.principal import Principal
from accounts_service.repos.user_repo import UserRepo

router = APIRouter(tags=["profile"])


class ProfileOut(BaseModel):
    id: str
    name: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime | None


@router.get("/me", response_model=ProfileOut)
async def get_my_profile(
    principal: Annotated[Principal, Depends(require_user)],
    repo: Annotated[UserRepo, Depends(get_user_repo)],
) -> ProfileOut:
    try:
        user_id = UUID(principal.user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        ) from None

    user = await repo.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")

    return ProfileOut(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role.value,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
