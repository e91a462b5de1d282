from typing import Any, Dict, List, Optional
from sqlmodel import Session, select, col

from domain.models.music import Music
from domain.models.share import MusicShare

class ShareRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_owner_and_music(self, owner_id: int, music_id: int) -> Optional[MusicShare]:
        query = select(MusicShare).where(MusicShare.user_id == owner_id, MusicShare.music_id == music_id)
        return self.session.exec(query).first()

    def get_by_token(self, token: str) -> Optional[MusicShare]:
        return self.session.exec(select(MusicShare).where(MusicShare.share_token == token)).first()

    def get_for_owner(self, owner_id: int, share_id: int) -> Optional[MusicShare]:
        query = select(MusicShare).where(MusicShare.id == share_id, MusicShare.user_id == owner_id)
        return self.session.exec(query).first()

    def token_exists(self, token: str) -> bool:
        return self.get_by_token(token) is not None

    def find_by_owner(self, owner_id: int) -> List[Dict[str, Any]]:
        """Shares of one owner, newest first, with the track title/artist attached."""
        query = (
            select(MusicShare, Music.title, Music.artist)
            .join(Music, Music.id == MusicShare.music_id, isouter=True)
            .where(MusicShare.user_id == owner_id)
            .order_by(col(MusicShare.created_at).desc(), col(MusicShare.id).desc())
        )
        results = []
        for share, title, artist in self.session.exec(query).all():
            row = share.model_dump()
            row["music_title"] = title or ""
            row["music_artist"] = artist or ""
            results.append(row)
        return results

    def add(self, share: MusicShare) -> MusicShare:
        self.session.add(share)
        return share

    def delete(self, share: MusicShare):
        self.session.delete(share)
