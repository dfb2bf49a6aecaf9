"""Resolve which view applies to a role.

Precedence: role default -> legacy default flag -> oldest view -> built-in.
The chain always produces a view; an empty bucket yields an in-memory
built-in view that is never persisted.
"""

import logging
from typing import Iterable

from viewforge.views.roles import normalize_role
from viewforge.views.store import ViewStore
from viewforge.views.types import (
    ColumnDescriptor,
    SectionDescriptor,
    ViewDefinition,
    ViewKind,
    ViewSource,
    view_kind,
)

logger = logging.getLogger(__name__)

BUILTIN_SLUG = "default"

BUILTIN_LIST_COLUMNS = [
    ("title", "Title"),
    ("status", "Status"),
    ("updated_at", "Updated"),
]

BUILTIN_EDITOR_FIELDS = ["title", "slug", "status"]


def builtin_view(
    entity_type_id: str,
    kind: ViewKind | str,
    role: str | None = None,
    extra_fields: Iterable[str] = (),
) -> ViewDefinition:
    """Synthesize the fallback view for an empty bucket.

    LIST views get title/status/updated columns. EDITOR views get one
    untitled section holding the built-in fields followed by extra_fields.
    """
    kind = view_kind(kind)
    role = normalize_role(role)

    if kind == ViewKind.LIST:
        payload: list = [ColumnDescriptor(key, label) for key, label in BUILTIN_LIST_COLUMNS]
        label = "Default list"
    else:
        fields = list(BUILTIN_EDITOR_FIELDS)
        for key in extra_fields:
            if key not in fields:
                fields.append(key)
        payload = [SectionDescriptor(id=BUILTIN_SLUG, fields=fields)]
        label = "Default editor"

    return ViewDefinition(
        id=None,
        entity_type_id=entity_type_id,
        kind=kind,
        slug=BUILTIN_SLUG,
        label=label,
        roles=[role] if role else [],
        payload=payload,
        source=ViewSource.BUILTIN,
    )


class ViewResolver:
    """Picks the applicable view for (entity type, kind, role)."""

    def __init__(self, store: ViewStore):
        self.store = store

    def resolve_default(
        self,
        entity_type_id: str,
        kind: ViewKind | str,
        role: str | None,
        extra_fields: Iterable[str] = (),
    ) -> ViewDefinition:
        kind = view_kind(kind)
        role = normalize_role(role)
        views = self.store.get(entity_type_id, kind, include_all=True)

        if role:
            for view in views:
                if role in view.default_roles:
                    return view

        # Views this role may use; with none, fall back to the whole bucket
        visible = [v for v in views if v.visible_to(role)] if role else views

        for view in visible:
            if view.legacy_default:
                return view

        if visible:
            return visible[0]
        if views:
            logger.debug(
                "No %s view of %s is visible to %s; using the oldest view",
                kind.value,
                entity_type_id,
                role,
            )
            return views[0]

        return builtin_view(entity_type_id, kind, role, extra_fields)
