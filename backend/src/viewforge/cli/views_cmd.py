"""Views CLI commands: list, resolve, reconcile."""

import click

from viewforge.catalog import EntityTypeCatalog
from viewforge.paths import database_config, resolve_paths
from viewforge.views import ViewService, ViewStore, ViewStoreError
from viewforge.views.types import ViewKind

KIND_CHOICE = click.Choice([k.value for k in ViewKind], case_sensitive=False)


def _open_store() -> ViewStore:
    base_path, _, _ = resolve_paths()
    return ViewStore(database_config(base_path).sqlalchemy_url)


def _open_service() -> ViewService:
    _, metadata_path, _ = resolve_paths()
    catalog = EntityTypeCatalog(metadata_path / "entity_types")
    catalog.load_all()
    return ViewService(_open_store(), catalog)


@click.group()
def views():
    """View configuration commands."""
    pass


@views.command("list")
@click.argument("entity_type")
@click.option("--kind", "-k", type=KIND_CHOICE, default="list", help="View kind.")
@click.option("--role", "-r", default=None, help="Only views this role may use.")
def list_views(entity_type: str, kind: str, role: str | None):
    """List views of ENTITY_TYPE (id or slug)."""
    service = _open_service()
    try:
        found = service.list_views(entity_type, kind, role=role)
    except ViewStoreError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    finally:
        service.store.dispose()

    if not found:
        click.echo("No views.")
        return

    for view in found:
        defaults = ", ".join(view.default_roles) or "-"
        click.echo(
            f"  {view.slug:<24} {view.label:<28} roles={','.join(view.roles) or '*'} "
            f"default={defaults}"
        )


@views.command()
@click.argument("entity_type")
@click.argument("role")
@click.option("--kind", "-k", type=KIND_CHOICE, default="list", help="View kind.")
def resolve(entity_type: str, role: str, kind: str):
    """Show which view ROLE gets for ENTITY_TYPE."""
    service = _open_service()
    try:
        view = service.resolve_view(entity_type, kind, role)
    except ViewStoreError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    finally:
        service.store.dispose()

    click.echo(f"{view.slug} ({view.label}) [{view.source.value}]")
    for item in view.payload_dicts():
        if view.kind == ViewKind.LIST:
            click.echo(f"  - {item['key']}: {item['label']}")
        else:
            click.echo(f"  - {item['id']} {item['title']!r}: {', '.join(item['fields'])}")


@views.command()
def reconcile():
    """Collapse duplicate view slugs and enforce slug uniqueness."""
    store = _open_store()
    try:
        removed = store.reconcile_all()
    except ViewStoreError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    finally:
        store.dispose()

    click.echo(f"Removed {removed} duplicate view row(s).")
    if store.unique_slugs:
        click.echo("Slug uniqueness is enforced.")
