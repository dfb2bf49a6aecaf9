"""ViewForge: role-scoped view configuration store."""

__version__ = "0.1.0"
