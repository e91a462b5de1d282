import secrets
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from domain.constants import SHARE_TOKEN_BYTES, SHARE_TOKEN_RETRIES
from domain.exceptions import InvalidInputError, NotFoundError, StorageError
from domain.models.music import Music
from domain.models.share import MusicShare
from infra.database.connection import transaction
from infra.repositories.music_repository import MusicRepository
from infra.repositories.share_repository import ShareRepository
from utils.clock import utc_now, to_naive_utc
from utils.logger import get_logger

logger = get_logger(__name__)

def generate_share_token() -> str:
    return secrets.token_hex(SHARE_TOKEN_BYTES)

class ShareAppService:
    def __init__(self, session: Session):
        self.session = session
        self.repository = ShareRepository(session)
        self.music_repository = MusicRepository(session)

    def create_or_get(self, owner_id: int, music_id: int, expires_in_hours: Optional[int] = None) -> MusicShare:
        """
        Return the owner's share for the track, creating it on first call.
        expires_in_hours only applies when the share is created.
        """
        if expires_in_hours is not None and expires_in_hours <= 0:
            raise InvalidInputError("expires_in_hours must be positive")

        if not self.music_repository.get_for_owner(owner_id, music_id):
            raise NotFoundError("Music not found")

        for attempt in range(1, SHARE_TOKEN_RETRIES + 1):
            created = False
            try:
                with transaction(self.session):
                    share = self.repository.get_by_owner_and_music(owner_id, music_id)
                    if share is None:
                        token = generate_share_token()
                        if self.repository.token_exists(token):
                            logger.warning(f"Share token collision (attempt {attempt}), drawing again")
                            continue

                        now = utc_now()
                        share = MusicShare(
                            user_id=owner_id,
                            music_id=music_id,
                            share_token=token,
                            view_count=0,
                            created_at=now,
                            expires_at=now + timedelta(hours=expires_in_hours) if expires_in_hours else None,
                        )
                        self.repository.add(share)
                        created = True
            except IntegrityError as e:
                # another writer got there first: either the (owner, track) share
                # now exists or the token was taken; the next pass sorts out which
                logger.warning(f"Share insert conflict for music {music_id} (attempt {attempt}): {e.orig}")
                continue

            # commit expired the instance; reload before it is serialised
            self.session.refresh(share)
            if created:
                logger.info(f"User {owner_id} shared music {music_id} (share {share.id})")
            return share

        raise StorageError("Could not allocate a share token")

    def resolve(self, token: str) -> Tuple[MusicShare, Music]:
        """
        公開リンク用のトークン解決。存在しない・期限切れ・曲が既にない場合はすべて NotFound。
        曲はシェアに記録されたオーナーで引き直す。
        """
        share = self.repository.get_by_token(token) if token else None
        if not share or not share.is_live(utc_now()):
            raise NotFoundError("Share not found or expired")

        music = self.music_repository.get_for_owner(share.user_id, share.music_id)
        if not music:
            raise NotFoundError("Shared music no longer exists")
        return share, music

    def get_shared_detail(self, token: str) -> Dict[str, Any]:
        share, music = self.resolve(token)
        detail = {
            "music_id": music.id,
            "title": music.title,
            "artist": music.artist,
            "album": music.album,
            "duration": music.duration,
            "file_type": music.file_type,
            # includes this view
            "view_count": (share.view_count or 0) + 1,
            "expires_at": share.expires_at,
        }
        self.increment_view(token)
        return detail

    def increment_view(self, token: str):
        """Best effort; a failed bump is logged and never reaches the listener."""
        try:
            with transaction(self.session):
                share = self.repository.get_by_token(token)
                if share:
                    share.view_count = (share.view_count or 0) + 1
                    self.session.add(share)
        except Exception as e:
            logger.error(f"Failed to increment view count for share {token[:8]}...: {e}")

    def list_shares(self, owner_id: int) -> List[Dict[str, Any]]:
        now = utc_now()
        shares = self.repository.find_by_owner(owner_id)
        for row in shares:
            expires_at = to_naive_utc(row["expires_at"])
            row["expired"] = expires_at is not None and expires_at <= now
        return shares

    def delete_share(self, owner_id: int, share_id: int):
        """Idempotent: an absent or foreign share is left alone and still reported as success."""
        with transaction(self.session):
            share = self.repository.get_for_owner(owner_id, share_id)
            if share:
                self.repository.delete(share)
                deleted = True
            else:
                deleted = False

        if deleted:
            logger.info(f"User {owner_id} deleted share {share_id}")
