import pytest
from fastapi.testclient import TestClient

from infra.security import create_access_token

CONTENT = bytes(range(256)) * 4  # 1024 bytes
TRACK = bytes(i % 251 for i in range(1000))

@pytest.fixture
def track(upload_music):
    return upload_music(filename="stream.mp3", content=TRACK)

def test_stream_full_file(client: TestClient, track, auth_headers):
    response = client.get("/api/music/stream", params={"id": track["id"]}, headers=auth_headers(1))
    assert response.status_code == 200
    assert response.content == TRACK
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.headers["content-length"] == "1000"
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["cache-control"] == "no-cache"
    assert "content-range" not in response.headers

def test_stream_byte_range(client: TestClient, track, auth_headers):
    headers = {**auth_headers(1), "Range": "bytes=0-99"}
    response = client.get("/api/music/stream", params={"id": track["id"]}, headers=headers)
    assert response.status_code == 206
    assert response.content == TRACK[:100]
    assert response.headers["content-range"] == "bytes 0-99/1000"
    assert response.headers["content-length"] == "100"

@pytest.mark.parametrize("range_header, expected, content_range", [
    ("bytes=900-", slice(900, 1000), "bytes 900-999/1000"),
    ("bytes=-10", slice(990, 1000), "bytes 990-999/1000"),
    ("bytes=500-5000", slice(500, 1000), "bytes 500-999/1000"),
])
def test_stream_open_and_suffix_ranges(client: TestClient, track, auth_headers, range_header, expected, content_range):
    headers = {**auth_headers(1), "Range": range_header}
    response = client.get("/api/music/stream", params={"id": track["id"]}, headers=headers)
    assert response.status_code == 206
    assert response.content == TRACK[expected]
    assert response.headers["content-range"] == content_range

def test_stream_unsatisfiable_range(client: TestClient, track, auth_headers):
    headers = {**auth_headers(1), "Range": "bytes=2000-"}
    response = client.get("/api/music/stream", params={"id": track["id"]}, headers=headers)
    assert response.status_code == 416
    assert response.headers["content-range"] == "bytes */1000"

def test_stream_malformed_range(client: TestClient, track, auth_headers):
    headers = {**auth_headers(1), "Range": "bytes=abc"}
    response = client.get("/api/music/stream", params={"id": track["id"]}, headers=headers)
    assert response.status_code == 400

def test_stream_accepts_token_query(client: TestClient, test_settings, track):
    token = create_access_token(1, app_settings=test_settings)
    response = client.get("/api/music/stream", params={"id": track["id"], "token": token})
    assert response.status_code == 200
    assert response.content == TRACK

def test_stream_requires_credentials(client: TestClient, track):
    response = client.get("/api/music/stream", params={"id": track["id"]})
    assert response.status_code == 401

    response = client.get("/api/music/stream", params={"id": track["id"], "token": "garbage"})
    assert response.status_code == 401

def test_stream_other_owner_is_not_found(client: TestClient, track, auth_headers):
    response = client.get("/api/music/stream", params={"id": track["id"]}, headers=auth_headers(2))
    assert response.status_code == 404

def test_stream_missing_file_is_not_found(client: TestClient, file_store, track, auth_headers):
    file_store.delete(track["file_path"])
    response = client.get("/api/music/stream", params={"id": track["id"]}, headers=auth_headers(1))
    assert response.status_code == 404

def test_stream_content_type_follows_file_type(client: TestClient, upload_music, auth_headers):
    music = upload_music(filename="clip.m4a", content=CONTENT)
    response = client.get("/api/music/stream", params={"id": music["id"]}, headers=auth_headers(1))
    assert response.headers["content-type"] == "audio/mp4"
    assert response.content == CONTENT
