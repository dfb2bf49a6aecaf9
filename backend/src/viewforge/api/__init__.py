"""HTTP API."""

from viewforge.api.app import app

__all__ = ["app"]
