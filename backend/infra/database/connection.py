from contextlib import contextmanager
from typing import Iterator
from fastapi import Request
from sqlmodel import create_engine, Session
import os
import threading
from infra.database.schema import init_raw_db
from utils.logger import get_logger

logger = get_logger(__name__)

BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# DuckDB resolves concurrent writers optimistically (the loser aborts), so
# writes that must not fail on conflict are serialised through this lock.
db_lock = threading.RLock()

class Database:
    """
    Owns the SQLAlchemy engine for one DuckDB file.
    Built once by the application factory and reached through app.state,
    so tests can hand every case its own database file.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.url = f"duckdb:///{db_path}"
        os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)

        connect_args = {'config': {'worker_threads': 4, 'access_mode': 'READ_WRITE'}}
        self.engine = create_engine(
            self.url,
            pool_size=5,
            max_overflow=10,
            connect_args=connect_args
        )

    def init(self):
        """
        Startup flow: raw DDL first, then Alembic on the same connection
        (a second engine would trip DuckDB's file lock).
        """
        from alembic.config import Config
        from alembic import command

        is_new_db = not os.path.exists(self.db_path) or os.path.getsize(self.db_path) == 0

        with db_lock:
            try:
                # 1. tables and sequences
                init_raw_db(self.engine)

                # 2. alembic
                alembic_cfg = Config(os.path.join(BACKEND_DIR, "alembic.ini"))
                alembic_cfg.set_main_option("script_location", os.path.join(BACKEND_DIR, "alembic"))
                alembic_cfg.set_main_option("sqlalchemy.url", self.url)

                with self.engine.begin() as connection:
                    alembic_cfg.attributes["connection"] = connection

                    if is_new_db:
                        logger.info("New database detected. Stamping version...")
                        command.stamp(alembic_cfg, "head")
                    else:
                        logger.info("Existing database detected. Running migrations...")
                        command.upgrade(alembic_cfg, "head")
            except Exception as e:
                logger.error(f"Error during database initialization: {e}")
                raise e

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self):
        self.engine.dispose()

def get_session(request: Request) -> Iterator[Session]:
    database: Database = request.app.state.db
    with database.session() as session:
        yield session

@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block, or roll all of it back.
    Reads that a write depends on belong inside the block too, so they see
    the rows committed by the previous lock holder.
    Session objects loaded before the block are expired on entry.
    """
    with db_lock:
        if session.in_transaction():
            # close the snapshot opened by earlier reads outside the lock
            session.commit()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
