from sqlalchemy import text
from sqlalchemy.engine import Engine
from utils.logger import get_logger

logger = get_logger(__name__)

CURRENT_SCHEMA_VERSION = 1

def get_db_schema_sql() -> str:
    """
    DuckDB fails UPDATEs on tables that carry FOREIGN KEY clauses, so the
    schema keeps only primary keys, unique constraints and indexes. Cascades
    (binding/share rows of a deleted track or lyrics entry) are done by the
    repositories inside the same transaction.
    """
    return """
    CREATE SEQUENCE IF NOT EXISTS seq_music_id START 1;
    CREATE SEQUENCE IF NOT EXISTS seq_lyrics_id START 1;
    CREATE SEQUENCE IF NOT EXISTS seq_music_shares_id START 1;

    CREATE TABLE IF NOT EXISTS music (
        id INTEGER PRIMARY KEY DEFAULT nextval('seq_music_id'),
        user_id INTEGER NOT NULL,
        title VARCHAR NOT NULL,
        artist VARCHAR DEFAULT '',
        album VARCHAR DEFAULT '',
        file_path VARCHAR NOT NULL,
        file_size BIGINT NOT NULL DEFAULT 0,
        duration INTEGER DEFAULT 0,
        file_type VARCHAR NOT NULL,
        cover_path VARCHAR,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (user_id, file_path)
    );

    CREATE TABLE IF NOT EXISTS lyrics (
        id INTEGER PRIMARY KEY DEFAULT nextval('seq_lyrics_id'),
        user_id INTEGER NOT NULL,
        title VARCHAR NOT NULL,
        artist VARCHAR DEFAULT '',
        content VARCHAR NOT NULL,
        file_path VARCHAR NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS music_lyrics_binding (
        music_id INTEGER PRIMARY KEY,
        lyrics_id INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS music_shares (
        id INTEGER PRIMARY KEY DEFAULT nextval('seq_music_shares_id'),
        user_id INTEGER NOT NULL,
        music_id INTEGER NOT NULL,
        share_token VARCHAR NOT NULL UNIQUE,
        view_count INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        expires_at TIMESTAMP,
        UNIQUE (user_id, music_id)
    );

    CREATE INDEX IF NOT EXISTS idx_music_user_created ON music (user_id, created_at);
    CREATE INDEX IF NOT EXISTS idx_lyrics_user_id ON lyrics (user_id);
    CREATE INDEX IF NOT EXISTS idx_music_shares_music_id ON music_shares (music_id);

    CREATE TABLE IF NOT EXISTS schema_info (
        key VARCHAR PRIMARY KEY,
        value VARCHAR NOT NULL
    );
    """

def get_schema_statements() -> list[str]:
    return [s.strip() for s in get_db_schema_sql().split(';') if s.strip()]

def get_current_schema_version(conn) -> int:
    try:
        result = conn.execute(text("SELECT value FROM schema_info WHERE key = 'version'"))
        row = result.fetchone()
        return int(row[0]) if row else 0
    except Exception:
        return 0

def set_schema_version(conn, version: int):
    conn.execute(text("""
        INSERT INTO schema_info (key, value) VALUES ('version', :version)
        ON CONFLICT (key) DO UPDATE SET value = :version
    """), {"version": str(version)})

def init_raw_db(conn_engine: Engine):
    logger.info("Initializing DuckDB schema...")
    try:
        with conn_engine.begin() as conn:
            for stmt in get_schema_statements():
                conn.execute(text(stmt))

            current_version = get_current_schema_version(conn)
            if current_version < CURRENT_SCHEMA_VERSION:
                set_schema_version(conn, CURRENT_SCHEMA_VERSION)
    except Exception as e:
        logger.error(f"Failed to initialize database schema: {e}")
        raise e
