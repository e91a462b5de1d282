# Aggregated table models (imported by alembic/env.py for metadata)
from domain.models.music import Music
from domain.models.lyrics import Lyrics, LyricsBinding
from domain.models.share import MusicShare
