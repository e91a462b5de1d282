"""music sharing schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op

from infra.database.schema import get_schema_statements

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # every statement is IF NOT EXISTS, so this is safe on databases that
    # init_raw_db already populated
    for stmt in get_schema_statements():
        op.execute(stmt)


def downgrade() -> None:
    for table in ("music_shares", "music_lyrics_binding", "lyrics", "music"):
        op.execute(f"DROP TABLE IF EXISTS {table}")
    for seq in ("seq_music_shares_id", "seq_lyrics_id", "seq_music_id"):
        op.execute(f"DROP SEQUENCE IF EXISTS {seq}")
