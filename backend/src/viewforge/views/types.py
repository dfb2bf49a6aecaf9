"""View definition types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from viewforge.views.errors import ValidationError


class ViewKind(str, Enum):
    LIST = "list"
    EDITOR = "editor"

    @classmethod
    def _missing_(cls, value):
        # Accept "LIST", " Editor " and the like
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


def view_kind(value: ViewKind | str) -> ViewKind:
    """Coerce a caller-supplied kind, rejecting unknown kinds as invalid input."""
    try:
        return ViewKind(value)
    except ValueError as e:
        raise ValidationError(f"Unknown view kind: {value!r}") from e


class ViewSource(str, Enum):
    DATABASE = "database"
    BUILTIN = "builtin"


# Wire names for EDITOR section layouts, keyed by column count
LAYOUT_NAMES = {
    1: "one-column",
    2: "two-column",
    3: "three-column",
}
LAYOUT_COLUMNS = {name: count for count, name in LAYOUT_NAMES.items()}
# Older layouts used "single-column"
LAYOUT_COLUMNS["single-column"] = 1


def column_count_from_layout(layout: Any) -> int | None:
    """Map a wire layout ("two-column" or 2) to a column count, None if unknown."""
    if layout is None or layout == "":
        return 1
    if isinstance(layout, bool):
        return None
    if isinstance(layout, int):
        return layout if layout in LAYOUT_NAMES else None
    text = str(layout).strip().lower()
    if text.isdigit():
        return column_count_from_layout(int(text))
    return LAYOUT_COLUMNS.get(text)


@dataclass
class ColumnDescriptor:
    """A single column in a LIST view."""

    field_key: str
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.field_key, "label": self.label}


@dataclass
class SectionDescriptor:
    """A section (widget) of an EDITOR view, holding an ordered set of fields."""

    id: str
    title: str = ""
    description: str = ""
    column_count: int = 1
    fields: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "layout": LAYOUT_NAMES.get(self.column_count, "one-column"),
            "fields": list(self.fields),
        }


@dataclass
class ViewDefinition:
    """A named, role-scoped presentation configuration for one entity type.

    ``roles`` and ``default_roles`` are the single source of truth for who
    may use the view and for whom it is auto-selected. ``legacy_default``
    mirrors the stored single-default flag so data written by older
    consumers (one row per role, one boolean) can still be resolved.
    """

    id: str | None
    entity_type_id: str
    kind: ViewKind
    slug: str
    label: str
    roles: list[str] = field(default_factory=list)
    default_roles: list[str] = field(default_factory=list)
    payload: list[ColumnDescriptor] | list[SectionDescriptor] = field(default_factory=list)
    legacy_default: bool = False
    source: ViewSource = ViewSource.DATABASE
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def is_default_any(self) -> bool:
        """True when the view is the default for at least one role."""
        return bool(self.default_roles)

    @property
    def legacy_role(self) -> str | None:
        """Single-role value for consumers that predate multi-role views."""
        return self.roles[0] if self.roles else None

    def visible_to(self, role: str) -> bool:
        """A view with no roles is visible to everyone."""
        return not self.roles or role in self.roles

    def payload_dicts(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.payload]

    def to_dict(self) -> dict[str, Any]:
        """Convert to API response dict."""
        data: dict[str, Any] = {
            "id": self.id,
            "entityTypeId": self.entity_type_id,
            "kind": self.kind.value,
            "slug": self.slug,
            "label": self.label,
            "roles": list(self.roles),
            "default_roles": list(self.default_roles),
            "isDefault": self.legacy_default,
            "role": self.legacy_role,
            "source": self.source.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.kind == ViewKind.LIST:
            data["config"] = {"columns": self.payload_dicts()}
        else:
            data["sections"] = self.payload_dicts()
        return data
