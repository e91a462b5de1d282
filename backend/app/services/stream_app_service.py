from dataclasses import dataclass
from typing import Optional
from sqlmodel import Session

from domain.constants import AUDIO_CONTENT_TYPES
from domain.exceptions import NotFoundError
from domain.models.music import Music
from domain.services.byte_range import parse_range_header
from infra.repositories.music_repository import MusicRepository
from infra.storage.local_store import LocalFileStore
from app.services.share_app_service import ShareAppService
from utils.logger import get_logger

logger = get_logger(__name__)

@dataclass
class AudioSlice:
    """The part of a stored audio file one response carries."""
    key: str
    start: int
    end: int
    size: int
    content_type: str
    partial: bool

    @property
    def length(self) -> int:
        return self.end - self.start + 1 if self.size else 0

class StreamAppService:
    def __init__(self, session: Session, file_store: LocalFileStore):
        self.session = session
        self.file_store = file_store
        self.music_repository = MusicRepository(session)
        self.share_service = ShareAppService(session)

    def owned_slice(self, owner_id: int, music_id: int, range_header: Optional[str] = None) -> AudioSlice:
        music = self.music_repository.get_for_owner(owner_id, music_id)
        if not music:
            raise NotFoundError("Music not found")
        return self._slice(music, range_header)

    def shared_slice(self, token: str, range_header: Optional[str] = None) -> AudioSlice:
        """
        Resolve the share, work out the span, then bump the view count.
        The bump is committed before the caller starts sending bytes.
        """
        _, music = self.share_service.resolve(token)
        audio = self._slice(music, range_header)
        self.share_service.increment_view(token)
        return audio

    def _slice(self, music: Music, range_header: Optional[str]) -> AudioSlice:
        try:
            size = self.file_store.size(music.file_path)
        except FileNotFoundError:
            logger.error(f"Audio file for music {music.id} is missing: {music.file_path}")
            raise NotFoundError("Audio file not found")

        content_type = AUDIO_CONTENT_TYPES.get(music.file_type.lower(), "application/octet-stream")
        span = parse_range_header(range_header, size)
        if span is None:
            return AudioSlice(music.file_path, 0, max(size - 1, 0), size, content_type, partial=False)

        start, end = span
        return AudioSlice(music.file_path, start, end, size, content_type, partial=True)
