"""Path and database resolution shared by the CLI and the API app."""

import os
from pathlib import Path

from viewforge.persistence.config import DatabaseConfig


def resolve_paths() -> tuple[Path, Path, Path]:
    """Resolve base, metadata, and migrations paths from cwd."""
    cwd = Path.cwd()
    if cwd.name == "backend":
        base_path = cwd.parent
    else:
        base_path = cwd
    metadata_path = Path(os.environ.get("VIEWFORGE_METADATA_PATH") or base_path / "metadata")
    migrations_path = base_path / "migrations"
    return base_path, metadata_path, migrations_path


def database_config(base_path: Path) -> DatabaseConfig:
    """Database config from the environment, with the SQLite directory created."""
    db_config = DatabaseConfig.from_env(base_path)
    db_config.ensure_parent_dir()
    return db_config
