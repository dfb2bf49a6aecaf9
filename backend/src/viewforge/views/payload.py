"""Request body parsing for view writes.

LIST bodies:   {slug, label, roles, default_roles, config: {columns: [{key, label}]}}
EDITOR bodies: {slug, label, roles, default_roles, sections: [{id, title, description, layout, fields}]}

Both accept ``current_slug`` to rename an existing view.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from viewforge.views.errors import ValidationError
from viewforge.views.types import (
    ColumnDescriptor,
    SectionDescriptor,
    ViewKind,
    column_count_from_layout,
    view_kind,
)


class ColumnBody(BaseModel):
    key: str
    label: str | None = None


class ListConfigBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    columns: list[ColumnBody] = Field(default_factory=list)


class SectionBody(BaseModel):
    id: str | None = None
    title: str | None = ""
    description: str | None = ""
    layout: str | int | None = None
    fields: list[str] = Field(default_factory=list)


class ViewBody(BaseModel):
    """Fields shared by both view kinds."""

    model_config = ConfigDict(extra="ignore")

    slug: str | None = None
    label: str | None = None
    roles: list[str] | None = None
    default_roles: list[str] | None = None
    current_slug: str | None = None


class ListViewBody(ViewBody):
    config: ListConfigBody = Field(default_factory=ListConfigBody)


class EditorViewBody(ViewBody):
    sections: list[SectionBody] = Field(default_factory=list)


@dataclass
class ViewDraft:
    """A validated view write, ready for ViewStore.put()."""

    kind: ViewKind
    slug: str | None
    label: str | None
    roles: list[str] | None
    default_roles: list[str] | None
    payload: list = field(default_factory=list)
    current_slug: str | None = None


def _format_errors(exc: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]


def _columns(body: ListViewBody) -> tuple[list[ColumnDescriptor], list[str]]:
    columns: list[ColumnDescriptor] = []
    errors: list[str] = []
    for index, column in enumerate(body.config.columns):
        key = column.key.strip()
        if not key:
            errors.append(f"config.columns.{index}.key: must not be blank")
            continue
        columns.append(ColumnDescriptor(field_key=key, label=(column.label or "").strip() or key))
    if not columns and not errors:
        errors.append("config.columns: a list view needs at least one column")
    return columns, errors


def _sections(body: EditorViewBody) -> tuple[list[SectionDescriptor], list[str]]:
    sections: list[SectionDescriptor] = []
    errors: list[str] = []
    seen_ids: set[str] = set()
    for index, section in enumerate(body.sections):
        section_id = (section.id or "").strip() or f"section-{index + 1}"
        if section_id in seen_ids:
            errors.append(f"sections.{index}.id: duplicate section id '{section_id}'")
            continue
        seen_ids.add(section_id)

        column_count = column_count_from_layout(section.layout)
        if column_count is None:
            errors.append(f"sections.{index}.layout: unknown layout '{section.layout}'")
            continue

        sections.append(
            SectionDescriptor(
                id=section_id,
                title=(section.title or "").strip(),
                description=section.description or "",
                column_count=column_count,
                fields=[f.strip() for f in section.fields if f and f.strip()],
            )
        )
    if not sections and not errors:
        errors.append("sections: an editor view needs at least one section")
    return sections, errors


def parse_view_body(kind: ViewKind | str, body: Mapping[str, Any] | None) -> ViewDraft:
    """Validate a raw request body into a ViewDraft.

    Raises:
        ValidationError: With every problem found, before anything is written.
    """
    kind = view_kind(kind)
    if not isinstance(body, Mapping):
        raise ValidationError("View body must be a JSON object")

    model_cls = ListViewBody if kind == ViewKind.LIST else EditorViewBody
    try:
        parsed = model_cls.model_validate(dict(body))
    except PydanticValidationError as e:
        errors = _format_errors(e)
        raise ValidationError("Invalid view body: " + "; ".join(errors), errors) from e

    errors: list[str] = []
    if not (parsed.slug or "").strip() and not (parsed.label or "").strip():
        errors.append("slug or label is required")

    if isinstance(parsed, ListViewBody):
        payload, payload_errors = _columns(parsed)
    else:
        payload, payload_errors = _sections(parsed)
    errors.extend(payload_errors)

    if errors:
        raise ValidationError("Invalid view body: " + "; ".join(errors), errors)

    return ViewDraft(
        kind=kind,
        slug=parsed.slug,
        label=parsed.label,
        roles=parsed.roles,
        default_roles=parsed.default_roles,
        payload=payload,
        current_slug=(parsed.current_slug or "").strip() or None,
    )
