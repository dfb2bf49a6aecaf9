"""Persistence layer - database configuration and engines."""

from viewforge.persistence.config import DatabaseConfig, create_db_engine

__all__ = ["DatabaseConfig", "create_db_engine"]
