from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class LyricsRead(BaseModel):
    id: int
    user_id: int
    title: str
    artist: str = ""
    content: str
    file_path: str
    created_at: datetime

class LyricsUploadRead(LyricsRead):
    # track the new lyrics were bound to on upload, if any
    music_id: Optional[int] = None

class LyricsUploadResponse(BaseModel):
    lyrics: LyricsUploadRead

class LyricsListResponse(BaseModel):
    list: List[LyricsRead]
    total: int

class LyricsPublicRead(BaseModel):
    """Unauthenticated view: no owner id, no storage key."""
    id: int
    title: str
    artist: str = ""
    content: str
    created_at: datetime

class LyricsByMusicResponse(BaseModel):
    lyrics: Optional[LyricsPublicRead] = None

class LyricsBindRequest(BaseModel):
    music_id: int
    lyrics_id: int
