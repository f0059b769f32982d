from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from slotkeeper.core.exceptions import ForbiddenException
from slotkeeper.core.security import Principal, decode_access_token
from slotkeeper.services.availability_service import AvailabilityManager

security = HTTPBearer(auto_error=False)


def get_availability_manager(request: Request) -> AvailabilityManager:
    """The manager wired onto app.state by create_app."""
    return request.app.state.availability_manager


async def get_current_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Principal:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    cfg = request.app.state.settings
    principal = decode_access_token(credentials.credentials, cfg.secret_key, cfg.algorithm)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


async def require_provider(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_provider:
        raise ForbiddenException("Only service providers may do this", code="FORBIDDEN")
    return principal
