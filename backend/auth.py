import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field, ValidationError

from config import settings

logger = logging.getLogger("cart-api")

bearer_scheme = HTTPBearer(auto_error=False, description="Supabase access token")


class SupabaseUser(BaseModel):
    id: str = Field(..., min_length=1)
    email: Optional[str] = None
    role: Optional[str] = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def fetch_supabase_user(access_token: str) -> SupabaseUser:
    try:
        async with httpx.AsyncClient(
            base_url=settings.supabase_url,
            timeout=settings.auth_timeout_seconds,
            headers={"apikey": settings.supabase_service_role_key},
        ) as client:
            response = await client.get(
                "/auth/v1/user", headers={"Authorization": f"Bearer {access_token}"}
            )
    except httpx.HTTPError as exc:
        logger.warning("Supabase auth lookup failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable",
        ) from exc
    if response.status_code != status.HTTP_200_OK:
        raise _unauthorized("Invalid auth token")
    try:
        return SupabaseUser.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise _unauthorized("Invalid user profile") from exc


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Missing auth token")
    user = await fetch_supabase_user(credentials.credentials)
    return user.id
