"""Entity type catalog mirror."""

from viewforge.catalog.loader import EntityType, EntityTypeCatalog, FieldSpec

__all__ = ["EntityType", "EntityTypeCatalog", "FieldSpec"]
