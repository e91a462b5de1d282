# Database module
from .connection import Database, get_session, transaction, db_lock
from .schema import init_raw_db, CURRENT_SCHEMA_VERSION
