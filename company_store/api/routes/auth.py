"""Verification of access tokens issued by the hosted identity service.

Sign-in (magic links) happens entirely on the hosted service; this module only
checks the bearer token it minted and loads the caller's store profile flags.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from company_store.api.deps import get_db_session
from company_store.core.config import Settings, get_settings
from company_store.models import Profile

RoleName = Literal["admin", "kiosk", "employee"]

router = APIRouter()
security_scheme = HTTPBearer(auto_error=True)


class TokenPayload(BaseModel):
    sub: str
    email: str | None = None
    exp: int


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str
    email: str | None
    roles: frozenset[str]
    access_token: str

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles


def _decode_token(*, token: str, settings: Settings) -> TokenPayload:
    options: dict[str, Any] = {}
    if settings.jwt_audience is None:
        options["verify_aud"] = False
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc
    try:
        return TokenPayload(**payload)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


def _roles_for(profile: Profile | None) -> frozenset[str]:
    roles = {"employee"}
    if profile is not None and profile.is_admin:
        roles.add("admin")
    if profile is not None and profile.is_kiosk:
        roles.add("kiosk")
    return frozenset(roles)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security_scheme),
    session: Session = Depends(get_db_session),
) -> AuthenticatedUser:
    settings = get_settings()
    payload = _decode_token(token=credentials.credentials, settings=settings)
    profile = session.get(Profile, payload.sub)
    return AuthenticatedUser(
        user_id=payload.sub,
        email=payload.email,
        roles=_roles_for(profile),
        access_token=credentials.credentials,
    )


def require_role(*roles: RoleName) -> Callable[..., AuthenticatedUser]:
    allowed_roles: set[str] = set(roles)

    def dependency(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if not allowed_roles & user.roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return dependency


@router.get("/me", summary="Identity and store roles of the caller")
def whoami(user: AuthenticatedUser = Depends(get_current_user)) -> dict[str, Any]:
    return {"user_id": user.user_id, "email": user.email, "roles": sorted(user.roles)}


__all__ = ["AuthenticatedUser", "get_current_user", "require_role", "router"]
