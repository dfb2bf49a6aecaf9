"""Table definition and row decoding for view definitions.

Rows may come from three generations of writers:

- current writes: ``roles``/``default_roles`` JSON columns, ``role`` NULL
- config-embedded writes: roles kept inside the payload JSON
- single-role writes: one row per role with an ``is_default`` flag

Decoding folds all three into the canonical role sets on read.
"""

import json
from typing import Any, Mapping

from viewforge.views.types import (
    ColumnDescriptor,
    SectionDescriptor,
    ViewDefinition,
    ViewKind,
    ViewSource,
    column_count_from_layout,
)

VIEWS_TABLE = "view_definitions"
SLUG_INDEX = "ux_view_definitions_slug"
BUCKET_INDEX = "idx_view_definitions_bucket"

CREATE_TABLE_SQL = f"""
    CREATE TABLE IF NOT EXISTS {VIEWS_TABLE} (
        id              TEXT PRIMARY KEY,
        entity_type_id  TEXT NOT NULL,
        kind            TEXT NOT NULL,
        slug            TEXT NOT NULL,
        label           TEXT NOT NULL,
        role            TEXT,
        is_default      INTEGER NOT NULL DEFAULT 0,
        roles           TEXT,
        default_roles   TEXT,
        payload         TEXT NOT NULL,
        created_at      TEXT NOT NULL,
        updated_at      TEXT
    )
"""

CREATE_BUCKET_INDEX_SQL = f"""
    CREATE INDEX IF NOT EXISTS {BUCKET_INDEX}
    ON {VIEWS_TABLE}(entity_type_id, kind)
"""

CREATE_SLUG_INDEX_SQL = f"""
    CREATE UNIQUE INDEX IF NOT EXISTS {SLUG_INDEX}
    ON {VIEWS_TABLE}(entity_type_id, kind, slug)
"""


def _load_json(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, (dict, list)):
        return value
    return json.loads(value)


def _role_list(values: Any) -> list[str]:
    result: list[str] = []
    for value in values or []:
        role = str(value or "").strip().upper()
        if role and role not in result:
            result.append(role)
    return result


def _payload_dict(row: Mapping[str, Any]) -> dict[str, Any]:
    payload = _load_json(row["payload"])
    return payload if isinstance(payload, dict) else {}


def row_roles(row: Mapping[str, Any]) -> list[str]:
    """Permitted roles of a stored row, across all writer generations."""
    stored = _load_json(row["roles"])
    if isinstance(stored, list):
        return _role_list(stored)
    embedded = _payload_dict(row).get("roles")
    if isinstance(embedded, list):
        return _role_list(embedded)
    return _role_list([row["role"]])


def row_default_roles(row: Mapping[str, Any]) -> list[str]:
    """Roles a stored row is the default for."""
    stored = _load_json(row["default_roles"])
    if isinstance(stored, list):
        return _role_list(stored)
    embedded = _payload_dict(row).get("default_roles")
    if isinstance(embedded, list):
        return _role_list(embedded)
    if row["is_default"] and row["role"]:
        return _role_list([row["role"]])
    return []


def decode_payload(kind: ViewKind, payload: Mapping[str, Any]) -> list:
    """Build descriptors from a stored payload dict."""
    if kind == ViewKind.LIST:
        columns = []
        for col in payload.get("columns") or []:
            if not isinstance(col, Mapping):
                continue
            key = str(col.get("key", ""))
            # Older writers omitted the label; an empty label is kept as written
            label = col.get("label")
            columns.append(ColumnDescriptor(field_key=key, label=key if label is None else str(label)))
        return columns

    sections = []
    for index, section in enumerate(payload.get("sections") or [], start=1):
        if not isinstance(section, Mapping):
            continue
        sections.append(
            SectionDescriptor(
                id=str(section.get("id") or f"section-{index}"),
                title=str(section.get("title") or ""),
                description=str(section.get("description") or ""),
                column_count=column_count_from_layout(section.get("layout")) or 1,
                fields=[str(f) for f in section.get("fields") or []],
            )
        )
    return sections


def encode_payload(view: ViewDefinition) -> str:
    """Serialize a view's descriptors for the payload column."""
    key = "columns" if view.kind == ViewKind.LIST else "sections"
    return json.dumps({key: view.payload_dicts()})


def row_to_view(row: Mapping[str, Any]) -> ViewDefinition:
    """Convert a database row (Mapping) to a ViewDefinition."""
    kind = ViewKind(row["kind"])
    return ViewDefinition(
        id=row["id"],
        entity_type_id=row["entity_type_id"],
        kind=kind,
        slug=row["slug"],
        label=row["label"],
        roles=row_roles(row),
        default_roles=row_default_roles(row),
        payload=decode_payload(kind, _payload_dict(row)),
        legacy_default=bool(row["is_default"]),
        source=ViewSource.DATABASE,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
