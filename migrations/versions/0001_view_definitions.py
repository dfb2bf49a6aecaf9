"""create view_definitions table"""

revision = "0001"
down_revision = None

from alembic import op
import sqlalchemy as sa


def upgrade():
    # ViewStore creates the table at startup; adopt it when present
    if sa.inspect(op.get_bind()).has_table("view_definitions"):
        return

    op.create_table(
        "view_definitions",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("entity_type_id", sa.Text(), nullable=False),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("label", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), nullable=True),
        sa.Column("is_default", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("roles", sa.Text(), nullable=True),
        sa.Column("default_roles", sa.Text(), nullable=True),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=True),
    )
    op.create_index(
        "idx_view_definitions_bucket", "view_definitions", ["entity_type_id", "kind"]
    )


def downgrade():
    op.drop_table("view_definitions")
