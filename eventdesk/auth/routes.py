"""Session routes."""
from fastapi import APIRouter, Depends

from eventdesk.auth.dependencies import get_current_user
from eventdesk.auth.schemas import SessionUser

router = APIRouter()


@router.get("/users/me", response_model=SessionUser)
async def get_me(current_user: SessionUser = Depends(get_current_user)):
    """Return the identity behind the current session."""
    return current_user
