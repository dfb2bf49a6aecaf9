"""Slug derivation and collision checks for view definitions."""

import re
from typing import Iterable, Mapping

from viewforge.views.errors import ConflictError, ValidationError

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(label: str | None) -> str:
    """Derive a URL-safe slug: lowercase, runs of other characters become '-'."""
    value = str(label or "").strip().lower()
    value = _NON_SLUG_CHARS.sub("-", value)
    return value.strip("-")


def allocate_slug(
    existing_slugs: Iterable[str],
    label: str | None,
    slug: str | None = None,
    current_slug: str | None = None,
    existing_labels: Mapping[str, str] | None = None,
) -> str:
    """Choose the slug a write will persist under.

    An explicit ``slug`` is normalized and used; otherwise the slug is
    derived from ``label``. Slugs are referenced from routes, so a slug
    that already names a different view is rejected rather than renamed.

    Args:
        existing_slugs: Slugs currently present in the bucket.
        label: Human label of the view.
        slug: Slug requested by the caller, if any.
        current_slug: Slug of the view being updated (rename source).
        existing_labels: Labels of the existing views, keyed by slug. A
                         label-derived slug whose view already carries the
                         same label is that view being saved again.

    Raises:
        ValidationError: Neither a usable slug nor a label was supplied.
        ConflictError: The slug belongs to another view in the bucket.
    """
    explicit = bool(slug and str(slug).strip())
    candidate = slugify(slug) if explicit else slugify(label)
    if not candidate:
        raise ValidationError("slug or label is required")

    # The view being written owns its own slug
    owner = current_slug or (candidate if explicit else None)
    if owner is None and existing_labels is not None:
        if existing_labels.get(candidate) == (label or "").strip():
            owner = candidate
    if candidate != owner and candidate in set(existing_slugs):
        raise ConflictError(candidate)
    return candidate
