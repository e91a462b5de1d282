from typing import Dict, Any
from tinytag import TinyTag

from utils.logger import get_logger

logger = get_logger(__name__)

_IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()

def read_audio_tags(filepath: str) -> Dict[str, Any]:
    """
    TinyTag で title / artist / album / duration と埋め込みカバー画像を読む。
    タグが読めないファイルでもアップロード自体は成功させるため、失敗時は空の値を返す。
    """
    result: Dict[str, Any] = {
        "title": "",
        "artist": "",
        "album": "",
        "duration": 0,
        "cover": None,
        "cover_ext": None,
    }
    try:
        tag = TinyTag.get(filepath, image=True)
    except Exception as e:
        logger.warning(f"Could not read tags from {filepath}: {e}")
        return result

    result["title"] = _clean(tag.title)
    result["artist"] = _clean(tag.artist)
    result["album"] = _clean(tag.album)

    if isinstance(tag.duration, (int, float)) and tag.duration > 0:
        result["duration"] = int(tag.duration)

    try:
        image = tag.images.any if tag.images else None
        if image is not None and isinstance(image.data, (bytes, bytearray)) and image.data:
            result["cover"] = bytes(image.data)
            result["cover_ext"] = _IMAGE_EXTENSIONS.get(_clean(image.mime_type).lower(), ".jpg")
    except Exception as e:
        logger.warning(f"Could not extract cover from {filepath}: {e}")

    return result
