from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from tourtabs.core.config import ALGORITHM, SECRET_KEY, SESSION_MAX_AGE


def create_session_token(api_token: str, user_name: Optional[str] = None) -> str:
    """Wrap the backend bearer token in a signed, expiring session cookie value."""
    expire = datetime.now(timezone.utc) + timedelta(seconds=SESSION_MAX_AGE)
    payload = {"api_token": api_token, "name": user_name, "exp": expire}
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def read_session_token(session_token: str) -> dict:
    """Decode a session cookie value. Raises JWTError when it is forged, expired or incomplete."""
    payload = jwt.decode(session_token, SECRET_KEY, algorithms=[ALGORITHM])
    if not payload.get("api_token"):
        raise JWTError("session has no api token")
    return payload
