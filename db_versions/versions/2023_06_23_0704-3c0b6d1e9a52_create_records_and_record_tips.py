"""create records and record_tips

Revision ID: 3c0b6d1e9a52
Revises:
Create Date: 2023-06-23 07:04:18.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c0b6d1e9a52'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "records",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("host", sa.Uuid(), nullable=False),
        sa.Column("parent", sa.Uuid(), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("version", sa.Text(), nullable=False),
        sa.Column("tag", sa.Text(), nullable=False),
        sa.Column("data", sa.LargeBinary(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("idx", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.current_timestamp(), nullable=False),
        sa.UniqueConstraint("host", "tag", "idx", name="_records_host_tag_idx_uc"),
    )
    op.create_index("ix_records_parent", "records", ["parent"])
    op.create_index("ix_records_user_id", "records", ["user_id"])

    op.create_table(
        "record_tips",
        sa.Column("host", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("tag", sa.Text(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("tip_id", sa.Uuid(), nullable=False),
        sa.Column("length", sa.BigInteger(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.current_timestamp(), nullable=False),
    )
    op.create_index("ix_record_tips_user_id", "record_tips", ["user_id"])


def downgrade():
    op.drop_index("ix_record_tips_user_id", table_name="record_tips")
    op.drop_table("record_tips")
    op.drop_index("ix_records_user_id", table_name="records")
    op.drop_index("ix_records_parent", table_name="records")
    op.drop_table("records")
