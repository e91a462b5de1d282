from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel
from datetime import datetime

from utils.clock import utc_now

class Lyrics(SQLModel, table=True):
    __tablename__ = "lyrics"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    title: str
    artist: str = Field(default="")
    content: str = Field(default="")  # LRC or plain text
    file_path: str
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

class LyricsBinding(SQLModel, table=True):
    __tablename__ = "music_lyrics_binding"

    # one row per track: the primary key is the track id
    music_id: int = Field(primary_key=True)
    lyrics_id: int
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
