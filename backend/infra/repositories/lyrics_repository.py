from typing import List, Optional
from sqlmodel import Session, select, or_, col

from domain.models.lyrics import Lyrics, LyricsBinding
from infra.repositories.music_repository import like_pattern, LIKE_ESCAPE

class LyricsRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_for_owner(self, owner_id: int, lyrics_id: int) -> Optional[Lyrics]:
        query = select(Lyrics).where(Lyrics.id == lyrics_id, Lyrics.user_id == owner_id)
        return self.session.exec(query).first()

    def exists(self, lyrics_id: int) -> bool:
        return self.session.get(Lyrics, lyrics_id) is not None

    def get_by_music_id(self, music_id: int) -> Optional[Lyrics]:
        query = (
            select(Lyrics)
            .join(LyricsBinding, LyricsBinding.lyrics_id == Lyrics.id)
            .where(LyricsBinding.music_id == music_id)
        )
        return self.session.exec(query).first()

    def search(self, owner_id: int, keyword: Optional[str] = None) -> List[Lyrics]:
        query = select(Lyrics).where(Lyrics.user_id == owner_id)
        if keyword:
            pattern = like_pattern(keyword)
            query = query.where(or_(
                col(Lyrics.title).ilike(pattern, escape=LIKE_ESCAPE),
                col(Lyrics.artist).ilike(pattern, escape=LIKE_ESCAPE),
            ))
        query = query.order_by(col(Lyrics.created_at).desc(), col(Lyrics.id).desc())
        return list(self.session.exec(query).all())

    def add(self, lyrics: Lyrics) -> Lyrics:
        self.session.add(lyrics)
        return lyrics

    def get_binding(self, music_id: int) -> Optional[LyricsBinding]:
        return self.session.exec(select(LyricsBinding).where(LyricsBinding.music_id == music_id)).first()

    def replace_binding(self, music_id: int, lyrics_id: int) -> LyricsBinding:
        """
        Drop the current binding of the track (if any) and stage the new one.
        SQLAlchemy folds delete + add of the same primary key into one UPDATE at flush time.
        """
        existing = self.get_binding(music_id)
        if existing:
            self.session.delete(existing)
        binding = LyricsBinding(music_id=music_id, lyrics_id=lyrics_id)
        self.session.add(binding)
        return binding

    def remove_binding(self, music_id: int) -> bool:
        existing = self.get_binding(music_id)
        if not existing:
            return False
        self.session.delete(existing)
        return True

    def delete_with_bindings(self, lyrics: Lyrics):
        bindings = self.session.exec(select(LyricsBinding).where(LyricsBinding.lyrics_id == lyrics.id)).all()
        for binding in bindings:
            self.session.delete(binding)
        self.session.delete(lyrics)
