"""Load entity types and their field catalogs from YAML files.

The catalog is owned elsewhere; views only reference entity types by id
and read their field keys. This loader mirrors that catalog locally.
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class FieldSpec:
    key: str
    label: str
    type: str = "text"


@dataclass
class EntityType:
    id: str
    slug: str
    label: str
    fields: list[FieldSpec] = field(default_factory=list)

    def field_keys(self) -> list[str]:
        return [f.key for f in self.fields]


class EntityTypeCatalog:
    """Loads entity types from metadata/entity_types/*.yaml files."""

    def __init__(self, entity_types_path: Path | None = None):
        self.entity_types_path = entity_types_path
        self.entity_types: dict[str, EntityType] = {}

    def load_all(self) -> None:
        """Load all entity types from YAML files."""
        if not self.entity_types_path or not self.entity_types_path.exists():
            return

        for yaml_file in sorted(self.entity_types_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
                if data and "entityType" in data:
                    self.register(self._parse_entity_type(data))

    def _parse_entity_type(self, data: dict) -> EntityType:
        """Parse an entity type YAML document."""
        name = str(data["entityType"])
        fields = []
        for raw in data.get("fields", []):
            key = raw["key"]
            fields.append(
                FieldSpec(
                    key=key,
                    label=raw.get("label") or key.replace("_", " ").title(),
                    type=raw.get("type", "text"),
                )
            )
        return EntityType(
            id=str(data.get("id") or name),
            slug=str(data.get("slug") or name).lower(),
            label=data.get("label") or name.title(),
            fields=fields,
        )

    def register(self, entity_type: EntityType) -> None:
        """Add or replace an entity type."""
        if entity_type.id in self.entity_types:
            del self.entity_types[entity_type.id]
        for existing in self.entity_types.values():
            if existing.slug == entity_type.slug:
                raise ValueError(
                    f"Duplicate entity type slug '{entity_type.slug}' used by both "
                    f"'{existing.id}' and '{entity_type.id}'"
                )
        self.entity_types[entity_type.id] = entity_type

    def get(self, entity_type_id: str) -> EntityType | None:
        """Get an entity type by id."""
        return self.entity_types.get(entity_type_id)

    def resolve(self, ref: str | None) -> EntityType | None:
        """Find an entity type by id, falling back to its slug."""
        if not ref:
            return None
        ref = str(ref).strip()
        found = self.entity_types.get(ref)
        if found:
            return found
        lowered = ref.lower()
        for entity_type in self.entity_types.values():
            if entity_type.slug == lowered:
                return entity_type
        return None

    def list_entity_types(self) -> list[EntityType]:
        """List all loaded entity types."""
        return list(self.entity_types.values())
