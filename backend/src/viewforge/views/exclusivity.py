"""Keep at most one default view per role within a bucket.

This is a procedural invariant, not a table constraint: it holds only
because ViewStore.put() calls enforce_default_exclusivity() inside its
write transaction before the target row is written. No other code path
may change a row's default roles.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Iterable

from sqlalchemy import text
from sqlalchemy.engine import Connection

from viewforge.views.rows import VIEWS_TABLE, row_default_roles
from viewforge.views.types import ViewKind

logger = logging.getLogger(__name__)


def enforce_default_exclusivity(
    conn: Connection,
    entity_type_id: str,
    kind: ViewKind,
    target_slug: str,
    claimed_roles: Iterable[str],
) -> list[str]:
    """Strip ``claimed_roles`` from the defaults of every other view.

    Args:
        conn: Connection with an open write transaction.
        entity_type_id: Bucket entity type.
        kind: Bucket view kind.
        target_slug: Slug of the view about to claim the roles. Rows under
                     this slug are left alone; the upsert rewrites them.
        claimed_roles: Roles that are becoming default for the target.

    Returns:
        IDs of the rows that lost at least one default role.
    """
    claimed = set(claimed_roles)
    if not claimed:
        return []

    rows = conn.execute(
        text(f"""
            SELECT id, slug, role, is_default, roles, default_roles, payload
            FROM {VIEWS_TABLE}
            WHERE entity_type_id = :entity_type_id
              AND kind = :kind
              AND slug <> :slug
        """),
        {"entity_type_id": entity_type_id, "kind": kind.value, "slug": target_slug},
    ).mappings().fetchall()

    now = datetime.now(UTC).isoformat()
    touched: list[str] = []
    for row in rows:
        current = row_default_roles(row)
        if claimed.isdisjoint(current):
            continue
        remaining = [role for role in current if role not in claimed]
        conn.execute(
            text(f"""
                UPDATE {VIEWS_TABLE}
                SET default_roles = :default_roles,
                    is_default = :is_default,
                    updated_at = :updated_at
                WHERE id = :id
            """),
            {
                "default_roles": json.dumps(remaining),
                "is_default": 1 if remaining else 0,
                "updated_at": now,
                "id": row["id"],
            },
        )
        touched.append(row["id"])
        logger.info(
            "Cleared default role(s) %s from view %s (%s)",
            ", ".join(sorted(claimed.intersection(current))),
            row["slug"],
            row["id"],
        )
    return touched
