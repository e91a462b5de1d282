from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from utils.clock import utc_now

class Music(SQLModel, table=True):
    """
    One uploaded audio file. (user_id, file_path) is unique.
    """
    __tablename__ = "music"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)

    # metadata
    title: str
    artist: str = Field(default="")
    album: str = Field(default="")

    # file
    file_path: str
    file_size: int = Field(default=0)
    duration: int = Field(default=0)  # seconds, 0 when unknown
    file_type: str
    cover_path: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
