from __future__ import annotations

from dataclasses import dataclass

from accounts_service.models.user import Role


@dataclass(frozen=True, slots=True)
class Principal:
    """Identity taken from a verified bearer token.

    ``user_id`` is the token's subject claim. ``role`` is informational;
    nothing in this service grants or denies access based on it.
    """

    user_id: str
    role: Role = Role.USER
