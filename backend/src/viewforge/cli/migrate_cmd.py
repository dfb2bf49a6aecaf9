"""Migrate CLI commands: apply, rollback, stamp, status."""

from pathlib import Path

import click

from viewforge.migrations.runner import (
    apply_migrations,
    get_migration_status,
    rollback_migration,
    stamp_migration,
)
from viewforge.paths import database_config, resolve_paths


def _has_migrations(migrations_path: Path) -> bool:
    versions_dir = migrations_path / "versions"
    return versions_dir.exists() and any(versions_dir.glob("*.py"))


@click.group()
def migrate():
    """Migration commands."""
    pass


@migrate.command()
@click.option("--to", "target", default=None, help="Apply up to a specific revision.")
def apply(target: str | None):
    """Apply pending migrations.

    Revision 0002 collapses duplicate view slugs left by older writers
    before it adds the unique index on (entity type, kind, slug).
    """
    base_path, _, migrations_path = resolve_paths()

    if not _has_migrations(migrations_path):
        click.echo("No migrations found.")
        return

    db_config = database_config(base_path)
    sa_url = db_config.sqlalchemy_url
    click.echo(f"Applying migrations to: {db_config.url}")

    try:
        apply_migrations(sa_url, migrations_path, target=target)
        click.echo("Migrations applied successfully.")
    except Exception as e:
        click.echo(f"Error applying migrations: {e}", err=True)
        raise SystemExit(1)

    _print_status(sa_url, migrations_path)


@migrate.command()
def rollback():
    """Rollback the last applied migration."""
    base_path, _, migrations_path = resolve_paths()

    db_config = database_config(base_path)
    sa_url = db_config.sqlalchemy_url

    click.echo(f"Rolling back last migration on: {db_config.url}")

    try:
        rollback_migration(sa_url, migrations_path)
        click.echo("Rollback successful.")
    except Exception as e:
        click.echo(f"Error rolling back: {e}", err=True)
        raise SystemExit(1)

    _print_status(sa_url, migrations_path)


@migrate.command()
@click.option(
    "--revision", "-r", default=None,
    help="Revision to stamp (default: head).",
)
def stamp(revision: str | None):
    """Mark migrations as applied without running them.

    Use this when the view table was already created by the API at
    startup and has no duplicate slugs.
    """
    base_path, _, migrations_path = resolve_paths()

    if not _has_migrations(migrations_path):
        click.echo("No migrations found.")
        return

    db_config = database_config(base_path)
    sa_url = db_config.sqlalchemy_url

    target = revision or "head"
    click.echo(f"Stamping database as revision '{target}' (no migrations executed).")

    try:
        stamp_migration(sa_url, migrations_path, revision=target)
        click.echo("Stamp successful.")
    except Exception as e:
        click.echo(f"Error stamping: {e}", err=True)
        raise SystemExit(1)

    _print_status(sa_url, migrations_path)


@migrate.command()
def status():
    """Show migration status (applied and pending)."""
    base_path, _, migrations_path = resolve_paths()

    if not _has_migrations(migrations_path):
        click.echo("No migrations found.")
        return

    db_config = database_config(base_path)
    _print_status(db_config.sqlalchemy_url, migrations_path)


def _print_status(database_url: str, migrations_dir: Path) -> None:
    """Print migration status table."""
    try:
        infos = get_migration_status(database_url, migrations_dir)
    except Exception as e:
        click.echo(f"Could not read migration status: {e}", err=True)
        return

    if not infos:
        click.echo("No migrations found.")
        return

    applied_count = sum(1 for i in infos if i.is_applied)
    pending_count = len(infos) - applied_count

    click.echo(f"\nMigration status ({applied_count} applied, {pending_count} pending):")
    for info in infos:
        marker = "[x]" if info.is_applied else "[ ]"
        click.echo(f"  {marker} {info.revision}: {info.description}")
