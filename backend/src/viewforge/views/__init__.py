"""View configuration management: store, resolver, seeds and API."""

from viewforge.views.errors import (
    ConflictError,
    NotFoundError,
    TransactionError,
    ValidationError,
    ViewStoreError,
)
from viewforge.views.types import (
    ColumnDescriptor,
    SectionDescriptor,
    ViewDefinition,
    ViewKind,
    ViewSource,
)
from viewforge.views.roles import normalize_roles
from viewforge.views.slugs import allocate_slug, slugify
from viewforge.views.store import ViewStore
from viewforge.views.resolver import ViewResolver, builtin_view
from viewforge.views.service import ViewService
from viewforge.views.loader import ViewSeedLoader

__all__ = [
    "ColumnDescriptor",
    "ConflictError",
    "NotFoundError",
    "SectionDescriptor",
    "TransactionError",
    "ValidationError",
    "ViewDefinition",
    "ViewKind",
    "ViewResolver",
    "ViewSeedLoader",
    "ViewService",
    "ViewSource",
    "ViewStore",
    "ViewStoreError",
    "allocate_slug",
    "builtin_view",
    "normalize_roles",
    "slugify",
]
