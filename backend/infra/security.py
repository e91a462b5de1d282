from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt

from config import Settings, settings as default_settings

class InvalidTokenError(Exception):
    """Access token is missing, malformed, expired, or carries no user id."""

def create_access_token(
    user_id: int,
    username: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    app_settings: Optional[Settings] = None,
) -> str:
    """Create JWT access token signed with the given app's SECRET_KEY."""
    app_settings = app_settings or default_settings
    if expires_delta is None:
        expires_delta = timedelta(minutes=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "user_id": user_id,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    if username:
        to_encode["username"] = username
    return jwt.encode(to_encode, app_settings.SECRET_KEY, algorithm=app_settings.JWT_ALGORITHM)

def decode_user_id(token: Optional[str], app_settings: Optional[Settings] = None) -> int:
    """
    Verify `token` and return the numeric user id it carries.
    Bearer headers and the `token` query parameter both end up here, with the
    settings of the app serving the request.
    """
    app_settings = app_settings or default_settings
    if not token:
        raise InvalidTokenError("Missing access token")
    try:
        payload = jwt.decode(token, app_settings.SECRET_KEY, algorithms=[app_settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    user_id = payload.get("user_id")
    # bool is an int subclass; a JSON true is not a user id
    if isinstance(user_id, bool) or not isinstance(user_id, (int, str)):
        raise InvalidTokenError("Token carries no user id")
    try:
        user_id = int(user_id)
    except ValueError as e:
        raise InvalidTokenError("Token carries no user id") from e
    if user_id <= 0:
        raise InvalidTokenError("Token carries no user id")
    return user_id
