import os
import sys
import tempfile
import pytest
from typing import Generator
from sqlmodel import Session

# 1. パス解決: backendディレクトリをsys.pathに追加
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.dirname(CURRENT_DIR)
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# ログはテスト用の一時ディレクトリへ（utils.logger はインポート時に読む）
os.environ.setdefault("TUNESHELF_LOG_DIR", tempfile.mkdtemp(prefix="tuneshelf_test_logs_"))

from config import Settings
from infra.database.connection import get_session
from infra.security import create_access_token

TEST_TRACK_LIMIT = 64 * 1024
TEST_LYRICS_LIMIT = 4 * 1024

@pytest.fixture(name="test_settings")
def test_settings_fixture(tmp_path) -> Settings:
    """テストごとに独立した DB ファイルとストレージディレクトリ"""
    return Settings(
        USER_DATA_DIR=str(tmp_path),
        DB_PATH=str(tmp_path / "tuneshelf_test.duckdb"),
        STORAGE_DIR=str(tmp_path / "uploads"),
        TUNESHELF_LOG_DIR=os.environ["TUNESHELF_LOG_DIR"],
        MAX_TRACK_UPLOAD_BYTES=TEST_TRACK_LIMIT,
        MAX_LYRICS_UPLOAD_BYTES=TEST_LYRICS_LIMIT,
        MUSIC_PAGE_SIZE=20,
        MAX_PAGE_SIZE=50,
        # not the default key: tokens must be verified with the settings handed to create_app
        SECRET_KEY="tuneshelf-test-secret",
    )

@pytest.fixture(name="client")
def client_fixture(test_settings: Settings) -> Generator:
    """
    FastAPIのTestClientを提供する。
    lifespan が Database を作成・初期化（Raw SQL + Alembic stamp）する。
    """
    from fastapi.testclient import TestClient
    from main import create_app

    app = create_app(test_settings)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

@pytest.fixture(name="session")
def session_fixture(client) -> Generator[Session, None, None]:
    """
    テスト本体とリクエストハンドラで同じセッションを共有し、DBの状態を直接検証できるようにする。
    """
    database = client.app.state.db
    with database.session() as session:
        client.app.dependency_overrides[get_session] = lambda: session
        yield session

@pytest.fixture(name="file_store")
def file_store_fixture(client):
    return client.app.state.file_store

@pytest.fixture(name="auth_headers")
def auth_headers_fixture(test_settings: Settings):
    def _headers(user_id: int = 1) -> dict:
        token = create_access_token(user_id, username=f"user{user_id}", app_settings=test_settings)
        return {"Authorization": f"Bearer {token}"}
    return _headers

@pytest.fixture(name="upload_music")
def upload_music_fixture(client, auth_headers):
    def _upload(user_id: int = 1, filename: str = "song.mp3", content: bytes = b"\x01" * 1000, **form) -> dict:
        response = client.post(
            "/api/music/upload",
            files={"file": (filename, content, "application/octet-stream")},
            data=form,
            headers=auth_headers(user_id),
        )
        assert response.status_code == 200, response.text
        return response.json()["music"]
    return _upload

@pytest.fixture(name="upload_lyrics")
def upload_lyrics_fixture(client, auth_headers):
    def _upload(user_id: int = 1, filename: str = "song.lrc", content: bytes = b"[00:01.00]hello\n[00:02.00]world\n", **form) -> dict:
        response = client.post(
            "/api/lyrics/upload",
            files={"file": (filename, content, "text/plain")},
            data=form,
            headers=auth_headers(user_id),
        )
        assert response.status_code == 200, response.text
        return response.json()["lyrics"]
    return _upload

@pytest.fixture(autouse=True)
def mock_tinytag(mocker):
    """
    タグ読み込みをグローバルにモック化する（テスト用のファイルは本物の音声ではないため）。
    各テストは return_value の属性を書き換えてタグ付きファイルを再現できる。
    """
    tag = mocker.Mock()
    tag.title = None
    tag.artist = None
    tag.album = None
    tag.duration = None
    tag.images.any = None
    return mocker.patch("tinytag.TinyTag.get", return_value=tag)
