from typing import Any, BinaryIO, Dict, Optional
from sqlmodel import Session

from config import Settings
from domain.constants import SUPPORTED_AUDIO_EXTENSIONS, MUSIC_PREFIX, COVER_PREFIX
from domain.exceptions import InvalidInputError, NotFoundError, StorageError
from domain.models.music import Music
from infra.database.connection import transaction
from infra.repositories.music_repository import MusicRepository
from infra.storage.local_store import LocalFileStore
from utils.filesystem import split_filename, build_storage_key, format_file_size
from utils.metadata import read_audio_tags
from utils.logger import get_logger

logger = get_logger(__name__)

def music_to_dict(music: Music) -> Dict[str, Any]:
    data = music.model_dump()
    data["file_size_str"] = format_file_size(music.file_size or 0)
    return data

class MusicAppService:
    def __init__(self, session: Session, file_store: LocalFileStore, app_settings: Settings):
        self.session = session
        self.file_store = file_store
        self.settings = app_settings
        self.repository = MusicRepository(session)

    def upload_music(
        self,
        owner_id: int,
        filename: Optional[str],
        stream: BinaryIO,
        title: Optional[str] = None,
        artist: Optional[str] = None,
        album: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        音楽ファイルを保存してメタデータを登録する。
        1. 拡張子チェック
        2. オーナー別のキーでファイルを書き込み（上限バイト数付き）
        3. TinyTag でタグ・カバー画像を読み、フォームの値を優先してマージ
        4. DB 登録。失敗した場合は書き込んだファイルを削除してからエラーを返す
        """
        if not filename:
            raise InvalidInputError("No file uploaded")

        stem, ext = split_filename(filename)
        if ext not in SUPPORTED_AUDIO_EXTENSIONS:
            raise InvalidInputError(
                f"Unsupported audio format '{ext or filename}'. Allowed: {', '.join(SUPPORTED_AUDIO_EXTENSIONS)}"
            )

        key = build_storage_key(MUSIC_PREFIX, owner_id, stem, ext)
        size = self.file_store.write(key, stream, max_bytes=self.settings.MAX_TRACK_UPLOAD_BYTES)

        cover_key = None
        try:
            if size == 0:
                raise InvalidInputError("Uploaded file is empty")

            tags = read_audio_tags(str(self.file_store.path_for(key)))
            if tags["cover"]:
                cover_key = self._save_cover(owner_id, stem, tags["cover"], tags["cover_ext"])

            music = Music(
                user_id=owner_id,
                title=(title or "").strip() or tags["title"] or stem or "Untitled",
                artist=(artist or "").strip() or tags["artist"],
                album=(album or "").strip() or tags["album"],
                file_path=key,
                file_size=size,
                duration=tags["duration"],
                file_type=ext.lstrip("."),
                cover_path=cover_key,
            )
            with transaction(self.session):
                self.repository.add(music)
            self.session.refresh(music)
        except Exception:
            self._remove_quietly(key)
            if cover_key:
                self._remove_quietly(cover_key)
            raise

        logger.info(f"User {owner_id} uploaded music {music.id} ({key}, {size} bytes)")
        return music_to_dict(music)

    def _save_cover(self, owner_id: int, stem: str, data: bytes, ext: str) -> Optional[str]:
        # a broken cover never fails the upload
        key = build_storage_key(COVER_PREFIX, owner_id, stem, ext or ".jpg")
        try:
            self.file_store.write_bytes(key, data)
            return key
        except StorageError as e:
            logger.warning(f"Could not store cover image for {stem}: {e}")
            return None

    def get_music(self, owner_id: int, music_id: int) -> Music:
        music = self.repository.get_for_owner(owner_id, music_id)
        if not music:
            raise NotFoundError("Music not found")
        return music

    def list_music(self, owner_id: int, page: int = 1, page_size: Optional[int] = None, keyword: Optional[str] = None) -> Dict[str, Any]:
        if page_size is None or page_size < 1:
            page_size = self.settings.MUSIC_PAGE_SIZE
        page_size = min(page_size, self.settings.MAX_PAGE_SIZE)
        page = max(page or 1, 1)
        keyword = (keyword or "").strip() or None

        items, total = self.repository.find_page(owner_id, (page - 1) * page_size, page_size, keyword)
        return {
            "list": [music_to_dict(m) for m in items],
            "current_page": page,
            "total_pages": (total + page_size - 1) // page_size,
            "total": total,
        }

    def delete_music(self, owner_id: int, music_id: int):
        """
        Rows go first (binding, shares, track) in one transaction; the audio
        and cover files are removed afterwards and failures there are only logged.
        """
        with transaction(self.session):
            music = self.repository.get_for_owner(owner_id, music_id)
            if not music:
                raise NotFoundError("Music not found")
            file_keys = [music.file_path, music.cover_path]
            self.repository.delete_with_dependents(music)

        logger.info(f"User {owner_id} deleted music {music_id}")
        for key in file_keys:
            if key:
                self._remove_quietly(key)

    def _remove_quietly(self, key: str):
        try:
            self.file_store.delete(key)
        except FileNotFoundError:
            logger.warning(f"File already missing: {key}")
        except Exception as e:
            logger.error(f"Failed to remove file {key}: {e}")
