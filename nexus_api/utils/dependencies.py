from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from pydantic import ValidationError as PydanticValidationError

from nexus_api.models.user import UserRole
from nexus_api.schemas.user import TokenPayload
from nexus_api.services.errors import ServiceError
from nexus_api.utils.security import decode_access_token


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get("token")
    if token:
        return token
    header = request.headers.get("Authorization")
    if header:
        parts = header.split(" ", 1)
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1].strip() or None
    return None


async def get_current_user(request: Request) -> dict:
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    try:
        claims = TokenPayload.model_validate(decode_access_token(token))
    except (jwt.PyJWTError, PydanticValidationError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    return {"_id": claims.sub, "email": claims.email, "role": claims.role.value}


def require_roles(*roles: UserRole):
    allowed = {r.value for r in roles}

    async def _checker(current_user: dict = Depends(get_current_user)) -> dict:
        if current_user.get("role") not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return current_user

    return _checker


def as_http_exception(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
