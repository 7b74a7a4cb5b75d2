"""Session token utilities - JWT decoding for credentials issued by the identity provider."""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from eventdesk.config import settings

# JWT settings
ALGORITHM = "HS256"
SESSION_EXPIRE_DAYS = 60  # Matches the provider's session cookie lifetime


def create_access_token(user_id: str, email: Optional[str] = None) -> str:
    """Create a signed session token for an owner.

    Production sessions are issued by the identity provider. This mirrors
    its token format for tests and local tooling.
    """
    expire = datetime.now(timezone.utc) + timedelta(days=SESSION_EXPIRE_DAYS)
    to_encode = {
        "sub": user_id,
        "email": email,
        "exp": expire,
        "iat": datetime.now(timezone.utc)
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a session token.

    Returns the payload if valid, None otherwise.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload
