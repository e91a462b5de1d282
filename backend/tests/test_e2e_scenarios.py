from fastapi.testclient import TestClient

from infra.security import create_access_token

def test_e2e_upload_bind_share_listen(client: TestClient, test_settings, mock_tinytag):
    """
    Scenario: A uploads song.mp3 and song.lrc, binds them, shares the track;
    an anonymous listener opens the share and plays it.
    """
    access_token = create_access_token(1, username="a", app_settings=test_settings)
    headers = {"Authorization": f"Bearer {access_token}"}
    mock_tinytag.return_value.duration = 180.0
    audio = bytes(i % 256 for i in range(4096))

    # 1. upload track
    response = client.post(
        "/api/music/upload",
        files={"file": ("song.mp3", audio, "audio/mpeg")},
        data={"artist": "Artist A", "album": "Album A"},
        headers=headers,
    )
    assert response.status_code == 200
    music = response.json()["music"]
    assert music["id"] == 1
    assert music["duration"] == 180

    # 2. upload lyrics
    lrc = "[00:00.00]la la\n[00:10.00]la la la\n".encode("utf-8")
    response = client.post("/api/lyrics/upload", files={"file": ("song.lrc", lrc, "text/plain")}, headers=headers)
    assert response.status_code == 200
    lyrics = response.json()["lyrics"]
    assert lyrics["id"] == 1

    # 3. bind
    response = client.post("/api/lyrics/bind", json={"music_id": music["id"], "lyrics_id": lyrics["id"]}, headers=headers)
    assert response.json() == {"ok": True}

    # 4. share twice -> same token
    first = client.post("/api/music/share", params={"music_id": music["id"]}, headers=headers).json()
    second = client.post("/api/music/share", params={"music_id": music["id"]}, headers=headers).json()
    token = first["share"]["share_token"]
    assert second["share"]["share_token"] == token

    # 5. anonymous listener
    detail = client.get("/api/music/share/detail", params={"token": token}).json()
    assert detail["title"] == "song"
    assert detail["artist"] == "Artist A"

    response = client.get(detail["stream_url"])
    assert response.status_code == 200
    assert response.content == audio

    response = client.get("/api/lyrics/get", params={"music_id": detail["music_id"]})
    assert response.json()["lyrics"]["content"].encode("utf-8") == lrc

    # 6. owner sees the views
    shares = client.get("/api/music/shares", headers=headers).json()["list"]
    assert shares[0]["view_count"] == 2

    # 7. owner deletes the track; the link dies with it
    assert client.delete("/api/music/delete", params={"id": music["id"]}, headers=headers).status_code == 200
    assert client.get("/api/music/share/detail", params={"token": token}).status_code == 404
    assert client.get("/api/lyrics/get", params={"music_id": music["id"]}).json() == {"lyrics": None}
