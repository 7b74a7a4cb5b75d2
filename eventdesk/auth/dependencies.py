"""FastAPI dependencies for authentication."""
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from eventdesk.auth.schemas import SessionUser
from eventdesk.auth.utils import decode_access_token
from eventdesk.config import settings

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Session token from the Authorization header, falling back to the session cookie."""
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> SessionUser:
    """
    Dependency to get the identity of the authenticated caller.

    Raises 401 if not authenticated or token is invalid.
    """
    token = extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return SessionUser(id=str(payload["sub"]), email=payload.get("email"))


async def get_current_owner_id(
    current_user: SessionUser = Depends(get_current_user),
) -> str:
    """Owner id used to scope every query and write."""
    return current_user.id
