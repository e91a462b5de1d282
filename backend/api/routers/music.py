from fastapi import APIRouter, Depends, HTTPException, Query, Header, UploadFile, File, Form
from sqlmodel import Session
from typing import Optional

from config import Settings
from infra.database.connection import get_session
from infra.storage.local_store import LocalFileStore, get_file_store
from api.deps import get_current_user_id, get_stream_user_id, get_app_settings
from api.errors import to_http_exception
from api.streaming import audio_response
from api.schemas.music import MusicUploadResponse, MusicListResponse
from app.services.music_app_service import MusicAppService
from app.services.stream_app_service import StreamAppService

router = APIRouter()

@router.post("/api/music/upload", response_model=MusicUploadResponse)
def upload_music(
    file: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    album: Optional[str] = Form(None),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    音楽ファイルをアップロードする。
    title が空の場合はタグ、それも無ければファイル名を使う。
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    service = MusicAppService(session, file_store, app_settings)
    try:
        music = service.upload_music(user_id, file.filename, file.file, title=title, artist=artist, album=album)
    except Exception as e:
        raise to_http_exception(e)
    finally:
        file.file.close()
    return {"music": music}

@router.get("/api/music/list", response_model=MusicListResponse)
def list_music(
    page: int = 1,
    page_size: Optional[int] = None,
    keyword: Optional[str] = None,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    service = MusicAppService(session, file_store, app_settings)
    return service.list_music(user_id, page=page, page_size=page_size, keyword=keyword)

@router.delete("/api/music/delete")
def delete_music(
    id: int = Query(..., description="Music id"),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    service = MusicAppService(session, file_store, app_settings)
    try:
        service.delete_music(user_id, id)
    except Exception as e:
        raise to_http_exception(e)
    return {"ok": True}

@router.get("/api/music/stream")
def stream_music(
    id: int = Query(..., description="Music id"),
    range: Optional[str] = Header(None),
    user_id: int = Depends(get_stream_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
):
    """
    Owner playback. Honors a single Range header (206 + Content-Range).
    """
    service = StreamAppService(session, file_store)
    try:
        audio = service.owned_slice(user_id, id, range)
    except Exception as e:
        raise to_http_exception(e)
    return audio_response(file_store, audio)
