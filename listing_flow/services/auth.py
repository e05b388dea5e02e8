from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from fastapi import Header, Security
from fastapi.security.api_key import APIKeyHeader

# Set by the upstream auth gateway after it verified the session
user_id_header = APIKeyHeader(name="X-User-Id", auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    business_verified: bool = False


class AuthProvider(Protocol):
    async def get_current_user(self) -> CurrentUser | None:
        ...


class StaticAuthProvider:
    """Auth provider for an identity that is already known (request header, tests)."""

    def __init__(self, user: CurrentUser | None):
        self._user = user

    async def get_current_user(self) -> CurrentUser | None:
        return self._user


async def get_request_user(
    user_id: str | None = Security(user_id_header),
    business_verified: bool = Header(default=False, alias="X-Business-Verified"),
) -> CurrentUser | None:
    if not user_id or not user_id.strip():
        return None
    return CurrentUser(id=user_id.strip(), business_verified=business_verified)

