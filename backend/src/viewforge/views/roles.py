"""Role-set normalization for view writes.

Roles are opaque uppercase identifiers owned by an external role
directory. Normalization happens once, at the single mutation entry point
(ViewStore.put), so every stored row carries the same canonical form.
"""

import os
from typing import Iterable

# Used when a view is saved without roles and without an acting role
SYSTEM_DEFAULT_ROLE = "ADMIN"


def default_role() -> str:
    """System default role, overridable with VIEWFORGE_DEFAULT_ROLE."""
    return normalize_role(os.environ.get("VIEWFORGE_DEFAULT_ROLE")) or SYSTEM_DEFAULT_ROLE


def normalize_role(role: str | None) -> str:
    """Trim and uppercase a single role; None becomes ''."""
    return str(role or "").strip().upper()


def _dedupe(roles: Iterable[str | None]) -> list[str]:
    seen: list[str] = []
    for role in roles:
        value = normalize_role(role)
        if value and value not in seen:
            seen.append(value)
    return seen


def normalize_roles(
    roles: Iterable[str | None] | None,
    default_roles: Iterable[str | None] | None,
    acting_role: str | None = None,
) -> tuple[list[str], list[str]]:
    """Normalize a view's permitted roles and default roles.

    Args:
        roles: Roles the caller asked to grant. Empty or None falls back to
               the acting role, then to the system default role.
        default_roles: Roles the view should be the default for.
        acting_role: Role of the user performing the write.

    Returns:
        ``(roles, default_roles)`` uppercased and de-duplicated in input
        order, with ``default_roles`` restricted to members of ``roles``.
    """
    normalized = _dedupe(roles or [])
    if not normalized:
        normalized = [normalize_role(acting_role) or default_role()]

    defaults = [r for r in _dedupe(default_roles or []) if r in normalized]
    return normalized, defaults
