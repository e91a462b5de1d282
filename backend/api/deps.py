from typing import Optional
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import Settings
from infra.security import InvalidTokenError, decode_user_id

bearer_scheme = HTTPBearer(auto_error=False)

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings

def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def _verify(raw: Optional[str], app_settings: Settings) -> int:
    if not raw:
        raise _unauthorized("Not authenticated")
    try:
        return decode_user_id(raw, app_settings)
    except InvalidTokenError:
        raise _unauthorized()

def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    app_settings: Settings = Depends(get_app_settings),
) -> int:
    """Owner id from the Authorization: Bearer header."""
    return _verify(credentials.credentials if credentials else None, app_settings)

def get_stream_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token: Optional[str] = Query(None, description="Access token for players that cannot set headers"),
    app_settings: Settings = Depends(get_app_settings),
) -> int:
    """
    <audio> 要素はヘッダーを付けられないため、ストリーミングでは ?token= も受け付ける。
    どちらも同じ decode_user_id で、リクエストを受けたアプリの設定を使って検証する。
    """
    return _verify(credentials.credentials if credentials else token, app_settings)
