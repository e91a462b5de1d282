# Audio containers accepted by the track upload
SUPPORTED_AUDIO_EXTENSIONS = ('.mp3', '.flac', '.wav', '.m4a', '.aac', '.ogg')

# Lyrics uploads (LRC or plain text)
SUPPORTED_LYRICS_EXTENSIONS = ('.lrc', '.txt')

AUDIO_CONTENT_TYPES = {
    "mp3": "audio/mpeg",
    "flac": "audio/flac",
    "wav": "audio/wav",
    "m4a": "audio/mp4",
    "aac": "audio/aac",
    "ogg": "audio/ogg",
}

# Storage key prefixes inside the file store
MUSIC_PREFIX = "music"
COVER_PREFIX = "covers"
LYRICS_PREFIX = "lyrics"

# 16 random bytes -> 32 hex chars
SHARE_TOKEN_BYTES = 16
SHARE_TOKEN_RETRIES = 3

STREAM_CHUNK_SIZE = 64 * 1024
