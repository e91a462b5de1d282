import sys
import os
from sqlalchemy import engine_from_config, pool, Integer
from sqlalchemy.engine import Connection
from sqlalchemy.ext.compiler import compiles
from sqlmodel import SQLModel
from alembic import context
from alembic.ddl.impl import DefaultImpl

# Alembic は duckdb 方言を知らないので DefaultImpl で登録する
class DuckDBImpl(DefaultImpl):
    __dialect__ = 'duckdb'

@compiles(Integer, "duckdb")
def compile_integer(element, compiler, **kw):
    return "INTEGER"

# CLI 実行時にもテーブルモデルを import できるよう backend/ をパスに追加
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import *  # noqa

config = context.config

# alembic.ini の URL が空なら設定 (DB_PATH) から組み立てる
if not config.get_main_option("sqlalchemy.url"):
    from config import settings
    config.set_main_option("sqlalchemy.url", settings.database_url)

target_metadata = SQLModel.metadata

def run_migrations_offline() -> None:
    """SQL を出力するだけのモード (alembic upgrade --sql)"""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()

def _run_with_connection(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    """
    Database.init() から渡された接続があればそれを使う。
    DuckDB は同じファイルへの二つ目の書き込み接続を拒否するため、ここで新しいエンジンは作らない。
    """
    injected = config.attributes.get("connection", None)
    if injected is not None:
        _run_with_connection(injected)
        return

    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        _run_with_connection(connection)

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
