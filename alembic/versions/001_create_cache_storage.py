"""001: create cache_storage table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE cache_storage (
            cache_key       VARCHAR(255)    PRIMARY KEY,
            data            TEXT            NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            expires_at      TIMESTAMPTZ     NULL
        );
    """)
    op.execute("CREATE INDEX idx_cache_storage_expires_at ON cache_storage (expires_at);")
    op.execute(
        "COMMENT ON COLUMN cache_storage.expires_at IS "
        "'Native expiry hint; freshness is decided from the JSON envelope';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS cache_storage CASCADE;")
