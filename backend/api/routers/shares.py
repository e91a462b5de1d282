from fastapi import APIRouter, Depends, Query, Header, Request
from sqlmodel import Session
from typing import Optional
from urllib.parse import quote

from config import Settings
from infra.database.connection import get_session
from infra.storage.local_store import LocalFileStore, get_file_store
from api.deps import get_current_user_id, get_app_settings
from api.errors import to_http_exception
from api.streaming import audio_response
from api.schemas.share import ShareCreateResponse, ShareListResponse, SharedMusicDetail
from app.services.share_app_service import ShareAppService
from app.services.stream_app_service import StreamAppService

router = APIRouter()

def share_url_for(request: Request, app_settings: Settings, token: str) -> str:
    """
    Link to the web player page for the share. That page belongs to the
    frontend, not this API; set PUBLIC_BASE_URL to the frontend origin.
    Without it the link falls back to the request host.
    """
    base = app_settings.PUBLIC_BASE_URL or str(request.base_url)
    return f"{base.rstrip('/')}/share/{token}"

@router.post("/api/music/share", response_model=ShareCreateResponse)
def create_share(
    request: Request,
    music_id: int = Query(...),
    expires_in_hours: Optional[int] = Query(None, ge=1),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    曲の共有リンクを作成する。同じ曲に対して既にリンクがあればそれをそのまま返す。
    """
    service = ShareAppService(session)
    try:
        share = service.create_or_get(user_id, music_id, expires_in_hours)
    except Exception as e:
        raise to_http_exception(e)
    return {
        "share": share.model_dump(),
        "share_url": share_url_for(request, app_settings, share.share_token),
    }

@router.get("/api/music/shares", response_model=ShareListResponse)
def list_shares(
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    service = ShareAppService(session)
    return {"list": service.list_shares(user_id)}

@router.delete("/api/music/share")
def delete_share(
    id: int = Query(...),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    service = ShareAppService(session)
    try:
        service.delete_share(user_id, id)
    except Exception as e:
        raise to_http_exception(e)
    return {"ok": True}

@router.get("/api/music/share/detail", response_model=SharedMusicDetail)
def get_shared_detail(
    token: str = Query(...),
    session: Session = Depends(get_session),
):
    """Public. Expired or unknown tokens answer 404."""
    service = ShareAppService(session)
    try:
        detail = service.get_shared_detail(token)
    except Exception as e:
        raise to_http_exception(e)
    detail["stream_url"] = f"/api/music/share/stream?token={quote(token)}"
    return detail

@router.get("/api/music/share/stream")
def stream_shared_music(
    token: str = Query(...),
    range: Optional[str] = Header(None),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
):
    service = StreamAppService(session, file_store)
    try:
        audio = service.shared_slice(token, range)
    except Exception as e:
        raise to_http_exception(e)
    return audio_response(file_store, audio)
