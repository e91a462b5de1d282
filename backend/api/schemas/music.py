from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class MusicRead(BaseModel):
    id: int
    user_id: int
    title: str
    artist: str = ""
    album: str = ""
    file_path: str
    file_size: int
    file_size_str: str
    duration: int = 0
    file_type: str
    cover_path: Optional[str] = None
    created_at: datetime

class MusicUploadResponse(BaseModel):
    music: MusicRead

class MusicListResponse(BaseModel):
    list: List[MusicRead]
    current_page: int
    total_pages: int
    total: int
