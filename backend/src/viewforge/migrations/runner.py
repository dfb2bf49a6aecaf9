"""Alembic migration runner.

Wraps Alembic's programmatic API to apply, rollback, stamp and inspect
the view store migrations without a static alembic.ini file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text


@dataclass
class MigrationInfo:
    """Info about a single migration."""

    revision: str
    description: str
    is_applied: bool


def _make_alembic_config(database_url: str, migrations_dir: Path) -> Config:
    """Create an Alembic Config pointing at migrations_dir."""
    _ensure_env(migrations_dir)

    cfg = Config()
    cfg.set_main_option("sqlalchemy.url", database_url)
    cfg.set_main_option("script_location", str(migrations_dir))
    return cfg


def _ensure_env(migrations_dir: Path) -> None:
    """Copy our env.py next to the versions/ directory if it is missing.

    Alembic loads env.py from the script location; the repository only
    ships the revision files.
    """
    if not (migrations_dir / "versions").is_dir():
        raise FileNotFoundError(f"No versions directory in {migrations_dir}")

    env_target = migrations_dir / "env.py"
    if not env_target.exists():
        env_source = Path(__file__).parent / "env.py"
        env_target.write_text(env_source.read_text())


def apply_migrations(
    database_url: str,
    migrations_dir: Path,
    target: str | None = None,
) -> None:
    """Apply pending migrations up to target (default: "head")."""
    cfg = _make_alembic_config(database_url, migrations_dir)
    command.upgrade(cfg, target or "head")


def stamp_migration(
    database_url: str,
    migrations_dir: Path,
    revision: str = "head",
) -> None:
    """Mark the database as being at a revision without running migrations.

    Use this to adopt migrations on a database whose view table was
    created by ViewStore at startup.
    """
    cfg = _make_alembic_config(database_url, migrations_dir)
    command.stamp(cfg, revision)


def rollback_migration(
    database_url: str,
    migrations_dir: Path,
) -> None:
    """Rollback the last applied migration."""
    cfg = _make_alembic_config(database_url, migrations_dir)
    command.downgrade(cfg, "-1")


def _current_heads(database_url: str) -> set[str]:
    engine = create_engine(database_url)
    try:
        with engine.connect() as conn:
            if not inspect(conn).has_table("alembic_version"):
                return set()
            result = conn.execute(text("SELECT version_num FROM alembic_version"))
            return {row[0] for row in result}
    finally:
        engine.dispose()


def get_migration_status(
    database_url: str,
    migrations_dir: Path,
) -> list[MigrationInfo]:
    """Get the status of all migrations, oldest first."""
    cfg = _make_alembic_config(database_url, migrations_dir)
    script = ScriptDirectory.from_config(cfg)

    # alembic_version only stores the head; everything below it is applied
    applied: set[str] = set()
    for head_rev in _current_heads(database_url):
        rev_obj = script.get_revision(head_rev)
        while rev_obj is not None:
            applied.add(rev_obj.revision)
            if rev_obj.down_revision:
                rev_obj = script.get_revision(str(rev_obj.down_revision))
            else:
                break

    migrations = [
        MigrationInfo(
            revision=rev.revision,
            description=rev.doc or "",
            is_applied=rev.revision in applied,
        )
        for rev in script.walk_revisions()
    ]
    # walk_revisions goes newest-first
    migrations.reverse()
    return migrations
