"""Pydantic schemas for the current session."""
from pydantic import BaseModel
from typing import Optional


class SessionUser(BaseModel):
    """Identity carried by the session token."""
    id: str
    email: Optional[str] = None
