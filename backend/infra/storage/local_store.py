"""
Local filesystem file store.

Content is addressed by relative keys such as "music/3/song_20240101120000_ab12cd34.mp3";
the rows in the database keep only the key, never an absolute path.
"""

import os
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from fastapi import Request

from domain.exceptions import InvalidInputError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024

class LocalFileStore:
    def __init__(self, root: str):
        self.root = Path(root).expanduser().absolute()
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        """Absolute path for a key. Keys escaping the store root are rejected."""
        if not key:
            raise InvalidInputError("Empty storage key")
        path = (self.root / key).resolve()
        if path != self.root.resolve() and self.root.resolve() not in path.parents:
            raise InvalidInputError(f"Storage key outside store: {key}")
        return path

    def write(self, key: str, stream: BinaryIO, max_bytes: Optional[int] = None) -> int:
        """
        Copy `stream` into the store under `key` and return the number of bytes written.
        A partially written file is removed before any error propagates.
        """
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        written = 0
        try:
            # "xb": a key is never silently overwritten
            with open(path, "xb") as out:
                while True:
                    chunk = stream.read(COPY_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise InvalidInputError(f"File exceeds the {max_bytes} byte upload limit")
                    out.write(chunk)
        except FileExistsError as e:
            raise StorageError(f"Storage key already in use: {key}") from e
        except InvalidInputError:
            self._discard(path)
            raise
        except OSError as e:
            self._discard(path)
            raise StorageError(f"Failed to write {key}: {e}") from e

        return written

    def write_bytes(self, key: str, data: bytes) -> int:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, "xb") as out:
                out.write(data)
        except OSError as e:
            self._discard(path)
            raise StorageError(f"Failed to write {key}: {e}") from e
        return len(data)

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def size(self, key: str) -> int:
        return self.path_for(key).stat().st_size

    def iter_range(self, key: str, start: int, end: int, chunk_size: int) -> Iterator[bytes]:
        """Yield bytes start..end (inclusive) of the stored file."""
        path = self.path_for(key)
        remaining = end - start + 1
        with open(path, "rb") as f:
            f.seek(start)
            while remaining > 0:
                chunk = f.read(min(chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk

    def delete(self, key: str):
        """
        Remove the file stored under `key`.
        FileNotFoundError propagates so callers can decide whether "already gone" is acceptable.
        """
        os.remove(self.path_for(key))

    def _discard(self, path: Path):
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove partial file {path}: {e}")

def get_file_store(request: Request) -> LocalFileStore:
    return request.app.state.file_store
