from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File, Form
from sqlmodel import Session
from typing import Optional

from config import Settings
from domain.exceptions import NotFoundError
from infra.database.connection import get_session
from infra.storage.local_store import LocalFileStore, get_file_store
from api.deps import get_current_user_id, get_app_settings
from api.errors import to_http_exception
from api.schemas.lyrics import LyricsUploadResponse, LyricsListResponse, LyricsByMusicResponse, LyricsPublicRead, LyricsBindRequest
from app.services.lyrics_app_service import LyricsAppService

router = APIRouter()

@router.post("/api/lyrics/upload", response_model=LyricsUploadResponse)
def upload_lyrics(
    file: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    music_id: Optional[int] = Form(None),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    service = LyricsAppService(session, file_store, app_settings)
    try:
        lyrics = service.upload_lyrics(user_id, file.filename, file.file, title=title, artist=artist, music_id=music_id)
    except Exception as e:
        raise to_http_exception(e)
    finally:
        file.file.close()
    return {"lyrics": lyrics}

@router.get("/api/lyrics/search", response_model=LyricsListResponse)
def search_lyrics(
    keyword: Optional[str] = None,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    自分の歌詞をタイトル・アーティストで部分一致検索する（大文字小文字は区別しない）。
    keyword が無ければ全件を新しい順に返す。
    """
    service = LyricsAppService(session, file_store, app_settings)
    return service.search_lyrics(user_id, keyword)

@router.post("/api/lyrics/bind")
def bind_lyrics(
    req: LyricsBindRequest,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    service = LyricsAppService(session, file_store, app_settings)
    try:
        service.bind(user_id, req.music_id, req.lyrics_id)
    except Exception as e:
        raise to_http_exception(e)
    return {"ok": True}

@router.post("/api/lyrics/unbind")
def unbind_lyrics(
    music_id: int = Query(...),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    service = LyricsAppService(session, file_store, app_settings)
    try:
        service.unbind(user_id, music_id)
    except Exception as e:
        raise to_http_exception(e)
    return {"ok": True}

@router.get("/api/lyrics/get", response_model=LyricsByMusicResponse)
def get_lyrics_by_music(
    music_id: int = Query(...),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    """Public: the share player page fetches lyrics without a credential."""
    service = LyricsAppService(session, file_store, app_settings)
    try:
        lyrics = service.get_by_music_id(music_id)
    except NotFoundError:
        return {"lyrics": None}
    return {"lyrics": LyricsPublicRead.model_validate(lyrics.model_dump())}

@router.delete("/api/lyrics/delete")
def delete_lyrics(
    id: int = Query(...),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_app_settings),
):
    service = LyricsAppService(session, file_store, app_settings)
    try:
        service.delete_lyrics(user_id, id)
    except Exception as e:
        raise to_http_exception(e)
    return {"ok": True}
