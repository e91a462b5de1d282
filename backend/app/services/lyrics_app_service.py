from typing import Any, BinaryIO, Dict, Optional
from sqlmodel import Session

from config import Settings
from domain.constants import SUPPORTED_LYRICS_EXTENSIONS, LYRICS_PREFIX
from domain.exceptions import InvalidInputError, NotFoundError, PermissionDeniedError, StorageError
from domain.models.lyrics import Lyrics
from domain.services.lyrics_formatter import format_lyrics_content
from infra.database.connection import transaction
from infra.repositories.lyrics_repository import LyricsRepository
from infra.repositories.music_repository import MusicRepository
from infra.storage.local_store import LocalFileStore
from utils.filesystem import split_filename, build_storage_key
from utils.logger import get_logger

logger = get_logger(__name__)

class LyricsAppService:
    def __init__(self, session: Session, file_store: LocalFileStore, app_settings: Settings):
        self.session = session
        self.file_store = file_store
        self.settings = app_settings
        self.repository = LyricsRepository(session)
        self.music_repository = MusicRepository(session)

    def upload_lyrics(
        self,
        owner_id: int,
        filename: Optional[str],
        stream: BinaryIO,
        title: Optional[str] = None,
        artist: Optional[str] = None,
        music_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        .lrc / .txt を受け取り、一行に詰め込まれた LRC は時間タグごとに改行して保存する。
        music_id が自分の曲を指していれば、そのまま紐付けまで行う。
        """
        if not filename:
            raise InvalidInputError("No file uploaded")

        stem, ext = split_filename(filename)
        if ext not in SUPPORTED_LYRICS_EXTENSIONS:
            raise InvalidInputError(
                f"Unsupported lyrics format '{ext or filename}'. Allowed: {', '.join(SUPPORTED_LYRICS_EXTENSIONS)}"
            )

        max_bytes = self.settings.MAX_LYRICS_UPLOAD_BYTES
        raw = stream.read(max_bytes + 1)
        if len(raw) > max_bytes:
            raise InvalidInputError(f"File exceeds the {max_bytes} byte upload limit")
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidInputError("Lyrics file must be UTF-8 text")

        content = format_lyrics_content(text)
        key = build_storage_key(LYRICS_PREFIX, owner_id, stem, ext)
        self.file_store.write_bytes(key, content.encode("utf-8"))

        try:
            lyrics = Lyrics(
                user_id=owner_id,
                title=(title or "").strip() or stem or "Untitled",
                artist=(artist or "").strip(),
                content=content,
                file_path=key,
            )
            bound_music_id = None
            with transaction(self.session):
                self.repository.add(lyrics)
                self.session.flush()
                if music_id:
                    music = self.music_repository.get_for_owner(owner_id, music_id)
                    if music:
                        self.repository.replace_binding(music.id, lyrics.id)
                        bound_music_id = music.id
                    else:
                        logger.warning(f"Upload by user {owner_id} named music {music_id} which it does not own; not binding")
            self.session.refresh(lyrics)
        except Exception:
            try:
                self.file_store.delete(key)
            except OSError as e:
                logger.error(f"Failed to remove orphaned lyrics file {key}: {e}")
            raise

        logger.info(f"User {owner_id} uploaded lyrics {lyrics.id} ({key})")
        data = lyrics.model_dump()
        data["music_id"] = bound_music_id
        return data

    def search_lyrics(self, owner_id: int, keyword: Optional[str] = None) -> Dict[str, Any]:
        keyword = (keyword or "").strip() or None
        items = self.repository.search(owner_id, keyword)
        return {"list": [l.model_dump() for l in items], "total": len(items)}

    def bind(self, owner_id: int, music_id: int, lyrics_id: int):
        """
        The track is authorised here; the swap itself checks the lyrics owner
        and replaces the binding in a single transaction.
        """
        if not self.music_repository.get_for_owner(owner_id, music_id):
            raise NotFoundError("Music not found")

        with transaction(self.session):
            lyrics = self.repository.get_for_owner(owner_id, lyrics_id)
            if not lyrics:
                if self.repository.exists(lyrics_id):
                    raise PermissionDeniedError("Lyrics not found")
                raise NotFoundError("Lyrics not found")
            self.repository.replace_binding(music_id, lyrics_id)

        logger.info(f"User {owner_id} bound lyrics {lyrics_id} to music {music_id}")

    def unbind(self, owner_id: int, music_id: int):
        if not self.music_repository.get_for_owner(owner_id, music_id):
            raise NotFoundError("Music not found")

        with transaction(self.session):
            removed = self.repository.remove_binding(music_id)

        if removed:
            logger.info(f"User {owner_id} unbound lyrics from music {music_id}")

    def get_by_music_id(self, music_id: int) -> Lyrics:
        lyrics = self.repository.get_by_music_id(music_id)
        if not lyrics:
            raise NotFoundError("No lyrics bound to this music")
        return lyrics

    def delete_lyrics(self, owner_id: int, lyrics_id: int):
        """
        歌詞ファイルを先に削除し、失敗した場合（既に存在しない場合を除く）は行を残したまま StorageError。
        その後、紐付けと本体を同一トランザクションで削除する。
        """
        lyrics = self.repository.get_for_owner(owner_id, lyrics_id)
        if not lyrics:
            raise NotFoundError("Lyrics not found")

        try:
            self.file_store.delete(lyrics.file_path)
        except FileNotFoundError:
            logger.warning(f"Lyrics file already missing: {lyrics.file_path}")
        except OSError as e:
            logger.error(f"Failed to remove lyrics file {lyrics.file_path}: {e}")
            raise StorageError("Failed to delete lyrics file") from e

        with transaction(self.session):
            lyrics = self.repository.get_for_owner(owner_id, lyrics_id)
            if lyrics:
                self.repository.delete_with_bindings(lyrics)

        logger.info(f"User {owner_id} deleted lyrics {lyrics_id}")
