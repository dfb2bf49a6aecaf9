"""Collapse duplicate view rows that share (entity_type_id, kind, slug).

Duplicates are residue from writers that upserted without a uniqueness
constraint. Once the unique index exists they cannot reappear, and this
module only serves legacy data: the store heals one slug at a time on
put(), and the reconcile command and migration 0002 heal everything.
"""

import logging
from typing import Any, Mapping, Sequence

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Connection

from viewforge.views.rows import VIEWS_TABLE

logger = logging.getLogger(__name__)


def select_canonical(rows: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Earliest created_at wins; ties go to the lowest id."""
    if not rows:
        raise ValueError("select_canonical() needs at least one row")
    return min(rows, key=lambda row: (row["created_at"] or "", row["id"]))


def reconcile_duplicates(
    conn: Connection,
    rows: Sequence[Mapping[str, Any]],
) -> Mapping[str, Any]:
    """Keep the canonical row and delete the rest.

    Must run inside the caller's transaction.

    Args:
        conn: Connection with an open transaction.
        rows: All rows sharing one (entity_type_id, kind, slug).

    Returns:
        The surviving row.
    """
    canonical = select_canonical(rows)
    doomed = [row["id"] for row in rows if row["id"] != canonical["id"]]
    if doomed:
        conn.execute(
            text(f"DELETE FROM {VIEWS_TABLE} WHERE id IN :ids").bindparams(
                bindparam("ids", expanding=True)
            ),
            {"ids": doomed},
        )
        logger.warning(
            "Collapsed %d duplicate view row(s) for %s/%s/%s into %s",
            len(doomed),
            canonical["entity_type_id"],
            canonical["kind"],
            canonical["slug"],
            canonical["id"],
        )
    return canonical


def find_duplicate_groups(conn: Connection) -> list[tuple[str, str, str]]:
    """Return every (entity_type_id, kind, slug) held by more than one row."""
    result = conn.execute(
        text(f"""
            SELECT entity_type_id, kind, slug
            FROM {VIEWS_TABLE}
            GROUP BY entity_type_id, kind, slug
            HAVING COUNT(*) > 1
        """)
    )
    return [(row[0], row[1], row[2]) for row in result]


def reconcile_all(conn: Connection) -> int:
    """Collapse every duplicate group. Returns the number of rows deleted."""
    removed = 0
    for entity_type_id, kind, slug in find_duplicate_groups(conn):
        rows = conn.execute(
            text(f"""
                SELECT * FROM {VIEWS_TABLE}
                WHERE entity_type_id = :entity_type_id
                  AND kind = :kind AND slug = :slug
            """),
            {"entity_type_id": entity_type_id, "kind": kind, "slug": slug},
        ).mappings().fetchall()
        reconcile_duplicates(conn, rows)
        removed += len(rows) - 1
    return removed
