"""collapse duplicate view slugs and enforce uniqueness"""

revision = "0002"
down_revision = "0001"

from alembic import op
import sqlalchemy as sa

from viewforge.views.dedup import reconcile_all

INDEX_NAME = "ux_view_definitions_slug"


def upgrade():
    bind = op.get_bind()
    existing = {ix["name"] for ix in sa.inspect(bind).get_indexes("view_definitions")}
    if INDEX_NAME in existing:
        return

    reconcile_all(bind)
    op.create_index(
        INDEX_NAME,
        "view_definitions",
        ["entity_type_id", "kind", "slug"],
        unique=True,
    )


def downgrade():
    op.drop_index(INDEX_NAME, table_name="view_definitions")
