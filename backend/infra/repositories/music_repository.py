from typing import List, Optional, Tuple
from sqlmodel import Session, select, or_, col
from sqlalchemy import func

from domain.models.music import Music
from domain.models.lyrics import LyricsBinding
from domain.models.share import MusicShare

LIKE_ESCAPE = "!"

def like_pattern(keyword: str) -> str:
    """ILIKE pattern that matches `keyword` literally; use with escape=LIKE_ESCAPE."""
    escaped = keyword.replace("!", "!!").replace("%", "!%").replace("_", "!_")
    return f"%{escaped}%"

class MusicRepository:
    """
    Queries on the music table. Every lookup takes the owner id so that
    ownership is part of the WHERE clause rather than a check after the fact.
    Writes are staged on the session; callers commit through transaction().
    """

    def __init__(self, session: Session):
        self.session = session

    def get_for_owner(self, owner_id: int, music_id: int) -> Optional[Music]:
        query = select(Music).where(Music.id == music_id, Music.user_id == owner_id)
        return self.session.exec(query).first()

    def find_page(self, owner_id: int, offset: int, limit: int, keyword: Optional[str] = None) -> Tuple[List[Music], int]:
        conditions = [Music.user_id == owner_id]
        if keyword:
            pattern = like_pattern(keyword)
            conditions.append(or_(
                col(Music.title).ilike(pattern, escape=LIKE_ESCAPE),
                col(Music.artist).ilike(pattern, escape=LIKE_ESCAPE),
                col(Music.album).ilike(pattern, escape=LIKE_ESCAPE),
            ))

        total = self.session.exec(select(func.count()).select_from(Music).where(*conditions)).one()

        query = (
            select(Music)
            .where(*conditions)
            .order_by(col(Music.created_at).desc(), col(Music.id).desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.exec(query).all()), int(total)

    def add(self, music: Music) -> Music:
        self.session.add(music)
        return music

    def delete_with_dependents(self, music: Music):
        """Stage deletion of the track together with its binding row and share rows."""
        binding = self.session.get(LyricsBinding, music.id)
        if binding:
            self.session.delete(binding)

        shares = self.session.exec(select(MusicShare).where(MusicShare.music_id == music.id)).all()
        for share in shares:
            self.session.delete(share)

        self.session.delete(music)
