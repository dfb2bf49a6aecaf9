"""Errors raised by the view configuration store."""


class ViewStoreError(Exception):
    """Base class for view store errors."""


class NotFoundError(ViewStoreError):
    """Unknown entity type or view slug."""


class ValidationError(ViewStoreError):
    """Malformed view input, rejected before any write is attempted."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or [message]


class ConflictError(ViewStoreError):
    """A slug already names a different view in the same bucket."""

    def __init__(self, slug: str, message: str | None = None):
        super().__init__(message or f"Slug '{slug}' is already used by another view")
        self.slug = slug


class TransactionError(ViewStoreError):
    """The underlying write transaction aborted. Retrying put() is safe."""
