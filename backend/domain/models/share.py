from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from utils.clock import utc_now, to_naive_utc

class MusicShare(SQLModel, table=True):
    __tablename__ = "music_shares"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    music_id: int
    share_token: str = Field(unique=True)
    view_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    expires_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    def is_live(self, now: datetime) -> bool:
        """Expiry is derived at read time: no expiry, or expiry still ahead of `now`."""
        expires_at = to_naive_utc(self.expires_at)
        return expires_at is None or expires_at > to_naive_utc(now)
