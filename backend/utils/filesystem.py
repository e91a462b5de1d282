import os
import re
import secrets
import unicodedata
from datetime import datetime

from utils.clock import utc_now

_UNSAFE_CHARS = re.compile(r"[^\w\-]+", re.UNICODE)
MAX_STEM_LENGTH = 64

def split_filename(filename: str) -> tuple[str, str]:
    """
    "My Song.MP3" -> ("My Song", ".mp3")
    Client supplied names may carry a directory part (Windows browsers do), only the base name counts.
    """
    base = os.path.basename((filename or "").replace("\\", "/"))
    stem, ext = os.path.splitext(base)
    return stem, ext.lower()

def sanitize_stem(stem: str) -> str:
    """
    ストレージキー用にファイル名を正規化する。
    NFC に揃えたうえで英数字・アンダースコア・ハイフン以外を "_" に置き換える。
    """
    normalized = unicodedata.normalize("NFC", stem or "")
    cleaned = _UNSAFE_CHARS.sub("_", normalized).strip("_")
    if not cleaned:
        cleaned = "file"
    return cleaned[:MAX_STEM_LENGTH]

def build_storage_key(prefix: str, owner_id: int, stem: str, ext: str, now: datetime | None = None) -> str:
    """
    <prefix>/<owner>/<stem>_<YYYYmmddHHMMSS>_<random>.<ext>
    The random suffix keeps two uploads of the same name within one second apart.
    """
    now = now or utc_now()
    ext = ext if ext.startswith(".") else f".{ext}"
    name = f"{sanitize_stem(stem)}_{now.strftime('%Y%m%d%H%M%S')}_{secrets.token_hex(4)}{ext.lower()}"
    return f"{prefix}/{owner_id}/{name}"

def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.2f} MB"
    return f"{size / (1024 * 1024 * 1024):.2f} GB"
