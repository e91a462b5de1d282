from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class ShareRead(BaseModel):
    id: int
    user_id: int
    music_id: int
    share_token: str
    view_count: int = 0
    created_at: datetime
    expires_at: Optional[datetime] = None

class ShareCreateResponse(BaseModel):
    share: ShareRead
    share_url: str

class ShareListItem(ShareRead):
    music_title: str = ""
    music_artist: str = ""
    expired: bool = False

class ShareListResponse(BaseModel):
    list: List[ShareListItem]

class SharedMusicDetail(BaseModel):
    music_id: int
    title: str
    artist: str = ""
    album: str = ""
    duration: int = 0
    file_type: str
    view_count: int = 0
    expires_at: Optional[datetime] = None
    stream_url: str
