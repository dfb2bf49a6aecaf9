"""Outward view operations: list, save, delete and resolve.

Entity type references may be an id or a slug; they are resolved through
the catalog before the store is touched.
"""

from typing import Any, Mapping

from viewforge.catalog.loader import EntityType, EntityTypeCatalog
from viewforge.views.errors import NotFoundError
from viewforge.views.payload import parse_view_body
from viewforge.views.resolver import ViewResolver
from viewforge.views.store import ViewStore
from viewforge.views.types import ViewDefinition, ViewKind


class ViewService:
    """Entry point for request handlers working with views."""

    def __init__(self, store: ViewStore, catalog: EntityTypeCatalog):
        self.store = store
        self.catalog = catalog
        self.resolver = ViewResolver(store)

    def _entity_type(self, ref: str) -> EntityType:
        entity_type = self.catalog.resolve(ref)
        if not entity_type:
            raise NotFoundError(f"Entity type not found: {ref}")
        return entity_type

    def list_views(
        self,
        entity_type_ref: str,
        kind: ViewKind | str,
        role: str | None = None,
        include_all: bool = False,
    ) -> list[ViewDefinition]:
        entity_type = self._entity_type(entity_type_ref)
        return self.store.get(entity_type.id, kind, role=role, include_all=include_all)

    def save_view(
        self,
        entity_type_ref: str,
        kind: ViewKind | str,
        body: Mapping[str, Any],
        acting_role: str | None = None,
    ) -> ViewDefinition:
        """Validate a view body and persist it."""
        entity_type = self._entity_type(entity_type_ref)
        draft = parse_view_body(kind, body)
        return self.store.put(
            entity_type.id,
            draft.kind,
            slug=draft.slug,
            label=draft.label,
            roles=draft.roles,
            default_roles=draft.default_roles,
            payload=draft.payload,
            acting_role=acting_role,
            current_slug=draft.current_slug,
        )

    def delete_view(
        self,
        entity_type_ref: str,
        kind: ViewKind | str,
        slug: str,
        role: str | None = None,
    ) -> bool:
        entity_type = self._entity_type(entity_type_ref)
        return self.store.delete(entity_type.id, kind, slug, role=role)

    def resolve_view(
        self,
        entity_type_ref: str,
        kind: ViewKind | str,
        role: str | None,
    ) -> ViewDefinition:
        """Return the view that applies to a role; never fails for an empty bucket."""
        entity_type = self._entity_type(entity_type_ref)
        return self.resolver.resolve_default(
            entity_type.id, kind, role, extra_fields=entity_type.field_keys()
        )
