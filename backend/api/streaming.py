from fastapi.responses import StreamingResponse

from app.services.stream_app_service import AudioSlice
from domain.constants import STREAM_CHUNK_SIZE
from infra.storage.local_store import LocalFileStore

def audio_response(file_store: LocalFileStore, audio: AudioSlice) -> StreamingResponse:
    """200 with the whole file, or 206 with exactly the requested span."""
    headers = {
        "Accept-Ranges": "bytes",
        "Cache-Control": "no-cache",
        "Content-Length": str(audio.length),
    }
    if audio.partial:
        headers["Content-Range"] = f"bytes {audio.start}-{audio.end}/{audio.size}"

    body = file_store.iter_range(audio.key, audio.start, audio.end, STREAM_CHUNK_SIZE) if audio.size else iter(())
    return StreamingResponse(
        body,
        status_code=206 if audio.partial else 200,
        media_type=audio.content_type,
        headers=headers,
    )
