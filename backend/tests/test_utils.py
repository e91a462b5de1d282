import re
from datetime import datetime, timedelta, timezone

from utils import clock, filesystem, logger, metadata

def test_split_filename():
    assert filesystem.split_filename("My Song.MP3") == ("My Song", ".mp3")
    assert filesystem.split_filename("C:\\Users\\me\\track.flac") == ("track", ".flac")
    assert filesystem.split_filename("noext") == ("noext", "")

def test_sanitize_stem():
    assert filesystem.sanitize_stem("My Song (live)") == "My_Song_live"
    assert filesystem.sanitize_stem("日本語の曲") == "日本語の曲"
    assert filesystem.sanitize_stem("../../etc") == "etc"
    assert filesystem.sanitize_stem("???") == "file"
    assert len(filesystem.sanitize_stem("a" * 200)) == filesystem.MAX_STEM_LENGTH

def test_build_storage_key():
    key = filesystem.build_storage_key("music", 3, "My Song", ".MP3", now=datetime(2024, 1, 2, 3, 4, 5))
    assert re.fullmatch(r"music/3/My_Song_20240102030405_[0-9a-f]{8}\.mp3", key)

    other = filesystem.build_storage_key("music", 3, "My Song", ".mp3", now=datetime(2024, 1, 2, 3, 4, 5))
    assert other != key

def test_format_file_size():
    assert filesystem.format_file_size(0) == "0 B"
    assert filesystem.format_file_size(1023) == "1023 B"
    assert filesystem.format_file_size(1536) == "1.50 KB"
    assert filesystem.format_file_size(5 * 1024 * 1024) == "5.00 MB"
    assert filesystem.format_file_size(3 * 1024 * 1024 * 1024) == "3.00 GB"

def test_read_audio_tags_fallback_on_error(mocker):
    mocker.patch("tinytag.TinyTag.get", side_effect=Exception("not audio"))
    tags = metadata.read_audio_tags("/nowhere/song.mp3")
    assert tags == {"title": "", "artist": "", "album": "", "duration": 0, "cover": None, "cover_ext": None}

def test_read_audio_tags_values(mock_tinytag, mocker):
    tag = mock_tinytag.return_value
    tag.title = "  Title "
    tag.artist = "Artist"
    tag.album = None
    tag.duration = 61.9
    tag.images.any = mocker.Mock(data=b"jpegdata", mime_type="image/jpeg")

    tags = metadata.read_audio_tags("/nowhere/song.mp3")
    assert tags["title"] == "Title"
    assert tags["artist"] == "Artist"
    assert tags["album"] == ""
    assert tags["duration"] == 61
    assert tags["cover"] == b"jpegdata"
    assert tags["cover_ext"] == ".jpg"

def test_logger_setup():
    log = logger.get_logger("test_logger")
    assert log is not None
    assert log is logger.get_logger("test_logger")
    assert len(log.handlers) == 2
    log.info("Test Log")

def test_to_naive_utc():
    assert clock.to_naive_utc(None) is None

    naive = datetime(2024, 1, 1, 12, 0)
    assert clock.to_naive_utc(naive) is naive

    aware = datetime(2024, 1, 1, 21, 0, tzinfo=timezone(timedelta(hours=9)))
    assert clock.to_naive_utc(aware) == datetime(2024, 1, 1, 12, 0)
    assert clock.utc_now().tzinfo is None
